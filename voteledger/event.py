"""Notifications emitted by the ledger. Internal channel, public event types."""

import dataclasses
import logging
from typing import Any, Callable, Iterable, List

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Voted:
    """A vote was accepted.

    This is the only signal of a successful vote to external listeners.
    """
    candidate_id: int
    voter: Any

    EVENT_NAME = 'Voted'

    def to_dict(self):
        return {'event': self.EVENT_NAME, 'candidate_id': self.candidate_id}


Listener = Callable[[Voted], Any]


class EventChannel:
    """Deliver events to subscribed listeners in subscription order.

    A listener that raises is logged and skipped; the remaining listeners
    are still called and the publisher never sees the exception. Listeners
    may subscribe or unsubscribe during delivery; the change applies from the
    next event.
    """
    def __init__(self, listeners: Iterable[Listener] = ()):
        self._listeners: List[Listener] = []
        for listener in listeners:
            self.subscribe(listener)

    def subscribe(self, listener: Listener) -> None:
        if not callable(listener):
            raise TypeError(f'event listener must be callable, got {listener!r}')
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        """Remove a listener. Raise ValueError if it was not subscribed."""
        self._listeners.remove(listener)

    def publish(self, event: Voted) -> None:
        logger.debug('publishing %s to %d listeners', event, len(self._listeners))
        for listener in tuple(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception('listener %r failed on %s', listener, event)

    def __len__(self) -> int:
        return len(self._listeners)
