'''Conversion of ledger objects to and from JSON-ready dictionaries.

The ledger lives in memory; storing it between calls is the job of the
hosting layer. This module gives the host a plain dictionary snapshot of the
ledger (:func:`to_dict`) that can be dumped as JSON, and restores the ledger
from it (:func:`from_dict`).

Objects are serialized as dictionaries with a ``class`` key holding the
scoped name of their class. Only classes from the ``voteledger`` package are
accepted when deserializing.
'''

import sys
import inspect
import importlib
from typing import Any, List, Dict


ZERO_PARAMS: List[str] = ['args', 'kwargs']
TRUSTED_PACKAGE: str = 'voteledger'


def simple_serialization(class_: type) -> type:
    '''A decorator to provide a simple to_dict() serialization method.

    The resulting method will serialize all object attributes corresponding
    to the class's constructor parameter names. Therefore, this decorator
    is only useful when the class exposes all its original parameters
    unchanged (or in any other form acceptable to its constructor).

    :param class_: The class to add the method to.
    '''
    if hasattr(class_, 'serialize_params'):
        param_names = class_.serialize_params
    else:
        param_names = list(inspect.signature(
            class_.__init__
        ).parameters.keys())
        if 'self' in param_names:
            param_names.remove('self')
        if param_names == ZERO_PARAMS and class_.__init__ == object.__init__:
            param_names = []

    def to_dict(self) -> Dict[str, Any]:
        out_dict = {'class': scoped_class_name(self)}
        for attr in param_names:
            out_dict[attr] = serialize_value(getattr(self, attr))
        return out_dict

    class_.to_dict = to_dict
    return class_


def serialize_value(value: Any) -> Any:
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    elif isinstance(value, tuple(ATOMIC_TYPES)):
        return value
    elif hasattr(value, '__iter__'):
        if hasattr(value, 'items') and hasattr(value, 'keys'):
            if all(isinstance(key, str) for key in value.keys()):
                return {
                    key: serialize_value(val)
                    for key, val in value.items()
                }
            else:
                raise ValueError(f'cannot serialize {value!r}: non-string keys')
        else:
            return [serialize_value(val) for val in value]
    else:
        raise ValueError(f'cannot serialize {value!r} to dict format')


def deserialize_value(value: Any) -> Any:
    if isinstance(value, dict):
        if 'class' in value and is_scoped_identifier(value['class']):
            return deserialize_class(value)
        else:
            return {key: deserialize_value(val) for key, val in value.items()}
    elif isinstance(value, tuple(ATOMIC_TYPES)):
        return value
    elif isinstance(value, list):
        return [deserialize_value(val) for val in value]
    else:
        raise ValueError(f'cannot deserialize {value!r}, type unknown')


def deserialize_class(clsdef: Dict[str, Any]) -> Any:
    cls = get_class(clsdef['class'])
    params = clsdef.copy()
    del params['class']
    if hasattr(cls, 'from_dict'):
        return cls.from_dict(params)
    else:
        for key, inner_val in params.items():
            params[key] = deserialize_value(inner_val)
        try:
            return cls(**params)
        except TypeError as err:
            raise ValueError(f'invalid parameters for {cls.__name__}: {err}')


def get_class(identifier: str) -> type:
    if '.' not in identifier:
        raise ValueError(f'unscoped class name: {identifier}')
    module, name = identifier.rsplit('.', 1)
    if module.split('.')[0] != TRUSTED_PACKAGE:
        raise ValueError(f'refusing to deserialize foreign class {identifier}')
    if module not in sys.modules:
        try:
            importlib.import_module(module)
        except ImportError:
            raise ValueError(f'unknown module in class name {identifier}')
    cls = getattr(sys.modules[module], name, None)
    if not isinstance(cls, type):
        raise ValueError(f'not a class: {identifier}')
    return cls


def from_dict(value: Dict[str, Any]) -> Any:
    """Restore a ledger object from a JSON-like dictionary.

    :param value: A dictionary created by :func:`to_dict`.
    :raises ValueError: If the dictionary is not a valid object definition.
    """
    if not isinstance(value, dict):
        raise ValueError('invalid voteledger object def: dict expected,'
                         f' got {value!r}')
    elif 'class' not in value:
        raise ValueError('invalid voteledger object def: must have a class key')
    elif not is_scoped_identifier(value['class']):
        inval_cls = value['class']
        raise ValueError(f"invalid voteledger class def: {inval_cls}")
    else:
        return deserialize_value(value)


def to_dict(obj: Any) -> Dict[str, Any]:
    """Serialize a ledger object to a JSON-ready dictionary.

    :param obj: A ledger, candidate or address object. It should provide
        a `to_dict()` method.
    """
    return serialize_value(obj)


def is_scoped_identifier(value: Any):
    return (
        isinstance(value, str)
        and not value.startswith('.')
        and all(chunk.isidentifier() for chunk in value.split('.'))
    )


def scoped_class_name(value: Any):
    cls = value.__class__
    return '.'.join((cls.__module__, cls.__name__))


ATOMIC_TYPES: List[type] = [
    str, int, float, bool, type(None),
]
