'''Conversion of election objects to JSON-ready dictionaries.

Value classes of Chairvote (candidates, voter records, outcomes, events...)
are decorated with :func:`simple_serialization`, which gives them a
``to_dict()`` method; :func:`to_dict` serializes any of them, including the
containers they are nested in.
'''

import enum
import inspect
from typing import Any, List, Dict


ZERO_PARAMS: List[str] = ['args', 'kwargs']


def simple_serialization(class_: type) -> type:
    '''A decorator to provide a simple to_dict() serialization method.

    The resulting method will serialize all object attributes corresponding
    to the class's constructor parameter names, unless the class lists the
    attributes to serialize in a ``serialize_params`` class attribute.

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
        out_dict = {'class': class_name(self)}
        for attr in param_names:
            out_dict[attr] = serialize_value(getattr(self, attr))
        return out_dict

    class_.to_dict = to_dict
    return class_


def serialize_value(value: Any) -> Any:
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    elif isinstance(value, enum.Enum):
        return value.name
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
                return {
                    'type': 'dict',
                    'keys': [serialize_value(key) for key in value.keys()],
                    'values': [serialize_value(val) for val in value.values()]
                }
        else:
            return [serialize_value(val) for val in value]
    else:
        raise ValueError(f'cannot serialize {value!r} to dict format')


def to_dict(obj: Any) -> Dict[str, Any]:
    """Serialize an election object to a JSON-ready dictionary.

    :param obj: An election object or similar. It should provide
        a `to_dict()` method (all the events, records and results from
        Chairvote have it, courtesy of the simple_serialization decorator).
    """
    return serialize_value(obj)


def class_name(value: Any) -> str:
    return value.__class__.__name__


ATOMIC_TYPES: List[type] = [
    str, int, float, bool, type(None),
]