"""
Structural description of runtime values.

The comparison engine never inspects values directly. It asks a :class:`ShapeDescriber` for the shape of each value:
its category (scalar, sequence, collection, map, record), the ordering semantics of containers, and the fields,
elements or entries to descend into. :class:`DefaultShapeDescriber` implements this with python's own introspection
(dataclasses, namedtuples, __slots__, vars() and the collections.abc protocols) plus numpy arrays.
"""

import dataclasses
import functools
import numpy as np
import sys
from collections.abc import Mapping, Sequence, Set
from datetime import date, time, timedelta
from enum import Enum
from numbers import Number
from .pytypes import DictValuesType, SingletonObjects
from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from typing import Any, Optional, Tuple


# Values of these types are always compared as a whole, never descended into
_SCALAR_TYPES = (Enum, bool, np.bool_, Number, np.generic, str, bytes, bytearray, memoryview, range, type, date, time,
                 timedelta)

# Instances of types defined in these modules are compared with their own __eq__ unless they are containers
_STDLIB_MODULES = frozenset(sys.stdlib_module_names) | {'builtins'}

_SLOT_NAMES_TO_SKIP = ('__dict__', '__weakref__')


class _Unset:
    """Value of a declared field (eg: a slot) that was never assigned on an instance"""
    __slots__ = ()

    def __repr__(self):
        return '<unset>'


UNSET = _Unset()


class ShapeKind(Enum):
    NULL = 'null'
    SCALAR = 'scalar'
    SEQUENCE = 'sequence'
    COLLECTION = 'collection'
    MAP = 'map'
    RECORD = 'record'


class Ordering(Enum):
    """How a container orders its elements. Only containers of the same ordering are compared element-wise."""
    NONE = 'none'
    INDEXED = 'indexed'
    HASHED = 'hashed'
    SORTED = 'sorted'


@dataclasses.dataclass(frozen=True)
class Shape:
    """
    Structural description of one value.

    Only one of `fields`, `elements` or `entries` is filled in, depending on `kind`:
        - RECORD: `fields` holds (name, value) pairs in declaration order
        - SEQUENCE, COLLECTION: `elements` holds the elements in iteration order
        - MAP: `entries` holds (key, value) pairs in iteration order
    """

    kind: 'ShapeKind'
    value_type: 'type'
    ordering: 'Ordering' = Ordering.NONE
    fields: 'Tuple[Tuple[str, Any], ...]' = ()
    elements: 'Tuple[Any, ...]' = ()
    entries: 'Tuple[Tuple[Any, Any], ...]' = ()

    @property
    def field_names(self) -> 'Tuple[str, ...]':
        return tuple(name for name, _ in self.fields)


@runtime_checkable
class ShapeDescriber(Protocol):
    def describe(self, value: 'Any') -> 'Shape':
        pass


class DefaultShapeDescriber:
    """Describes values using python's runtime introspection"""

    def describe(self, value: 'Any') -> 'Shape':
        value_type = type(value)

        if value is None:
            return Shape(ShapeKind.NULL, value_type)

        if is_scalar(value):
            return Shape(ShapeKind.SCALAR, value_type)

        # Multi-dimensional arrays are sequences of their sub-arrays along the first axis
        if isinstance(value, np.ndarray):
            if value.ndim == 0:
                return Shape(ShapeKind.SCALAR, value_type)
            return Shape(ShapeKind.SEQUENCE, value_type, Ordering.INDEXED, elements=tuple(value))

        if isinstance(value, Mapping):
            return Shape(ShapeKind.MAP, value_type, _container_ordering(value), entries=tuple(value.items()))

        if isinstance(value, (Set, DictValuesType)):
            return Shape(ShapeKind.COLLECTION, value_type, _container_ordering(value), elements=tuple(value))

        # namedtuples are records first, tuples second
        if isinstance(value, tuple) and hasattr(value_type, '_fields'):
            return Shape(ShapeKind.RECORD, value_type, fields=tuple(zip(value_type._fields, value)))

        if isinstance(value, Sequence):
            return Shape(ShapeKind.SEQUENCE, value_type, Ordering.INDEXED, elements=tuple(value))

        if _is_stdlib_type(value_type):
            return Shape(ShapeKind.SCALAR, value_type)

        fields = _record_fields(value)
        if fields is None:
            return Shape(ShapeKind.SCALAR, value_type)
        return Shape(ShapeKind.RECORD, value_type, fields=fields)


DEFAULT_DESCRIBER = DefaultShapeDescriber()


def is_scalar(value: 'Any') -> 'bool':
    return value is UNSET or any(value is x for x in SingletonObjects) or isinstance(value, _SCALAR_TYPES)


def is_sorted_container(value: 'Any') -> 'bool':
    """Sorted containers are recognized by their sorted-access capability (bisect_left and irange)"""
    return callable(getattr(value, 'bisect_left', None)) and callable(getattr(value, 'irange', None))


def _container_ordering(value: 'Any') -> 'Ordering':
    return Ordering.SORTED if is_sorted_container(value) else Ordering.HASHED


def _is_stdlib_type(cls: 'type') -> 'bool':
    return cls.__module__.partition('.')[0] in _STDLIB_MODULES


def _record_fields(value: 'Any') -> 'Optional[Tuple[Tuple[str, Any], ...]]':
    """Returns the (name, value) pairs of a record-like object, or None if it declares no fields at all"""
    if dataclasses.is_dataclass(value):
        return tuple((f.name, getattr(value, f.name, UNSET)) for f in dataclasses.fields(value))

    names = []
    for klass in reversed(type(value).__mro__):
        slots = klass.__dict__.get('__slots__', ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in _SLOT_NAMES_TO_SKIP:
                continue
            # Private slots are name-mangled
            if name.startswith('__') and not name.endswith('__'):
                name = '_%s%s' % (klass.__name__.lstrip('_'), name)
            if name not in names:
                names.append(name)

    has_dict = hasattr(value, '__dict__')
    if has_dict:
        names.extend(name for name in vars(value) if name not in names)
    elif not names:
        return None

    return tuple((name, getattr(value, name, UNSET)) for name in names)


@functools.lru_cache(maxsize=None)
def type_ancestry(cls: 'type') -> 'Tuple[type, ...]':
    """
    Linear ancestry of a type, starting with the type itself: each step follows the first base class only.

    Mixins, further bases of multiple inheritance, and virtual subclass registrations (ABCs, Protocols) are not part
    of the ancestry.
    """
    chain = []
    while cls is not None:
        chain.append(cls)
        bases = cls.__bases__
        cls = bases[0] if bases else None
    return tuple(chain)
