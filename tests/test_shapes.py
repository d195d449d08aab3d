"""
Tests for the deepequal.shapes file
"""

from deepequal.shapes import DEFAULT_DESCRIBER, DefaultShapeDescriber, Ordering, ShapeDescriber, ShapeKind, \
    UNSET, type_ancestry
from collections import OrderedDict, deque, namedtuple
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from pathlib import PurePosixPath
from sortedcontainers import SortedDict, SortedList, SortedSet
import numpy as np


class _Color(Enum):
    RED = 1


@dataclass
class _Record:
    b: int
    a: int = 0
    tags: list = field(default_factory=list)


class _Plain:
    def __init__(self):
        self.second = 2
        self.first = 1


class _Slotted:
    __slots__ = ('x', '__secret')

    def __init__(self):
        self.x = 1
        self.__secret = 2


class _SlottedChild(_Slotted):
    def __init__(self):
        super().__init__()
        self.extra = 3


class _HalfSlotted:
    __slots__ = ('x', 'y')

    def __init__(self):
        self.x = 1


class _Empty:
    pass


_Pair = namedtuple('_Pair', 'left right')


def _kind(value):
    return DEFAULT_DESCRIBER.describe(value).kind


def test_scalars():
    for value in [1, 1.5, True, np.float32(2), np.bool_(False), 'a', b'a', bytearray(b'a'), range(3), int, _Color.RED,
                  date(2000, 1, 1), np.datetime64('2000-01-01'), Decimal('1.1'), PurePosixPath('/tmp'), Ellipsis,
                  np.array(3), object()]:
        assert _kind(value) is ShapeKind.SCALAR, repr(value)
    assert _kind(None) is ShapeKind.NULL


def test_containers():
    for value in [[1], (1,), deque([1]), np.arange(3), SortedList([2, 1])]:
        shape = DEFAULT_DESCRIBER.describe(value)
        assert shape.kind is ShapeKind.SEQUENCE and shape.ordering is Ordering.INDEXED, repr(value)

    assert DEFAULT_DESCRIBER.describe({1}).ordering is Ordering.HASHED
    assert DEFAULT_DESCRIBER.describe({}.keys()).kind is ShapeKind.COLLECTION
    assert DEFAULT_DESCRIBER.describe({}.values()).kind is ShapeKind.COLLECTION
    assert DEFAULT_DESCRIBER.describe(SortedSet([1])).ordering is Ordering.SORTED

    assert DEFAULT_DESCRIBER.describe(OrderedDict()).kind is ShapeKind.MAP
    assert DEFAULT_DESCRIBER.describe({'a': 1}).entries == (('a', 1),)
    assert DEFAULT_DESCRIBER.describe(SortedDict({1: 2})).ordering is Ordering.SORTED


def test_numpy_arrays_split_on_first_axis():
    shape = DEFAULT_DESCRIBER.describe(np.arange(6).reshape(3, 2))
    assert len(shape.elements) == 3
    assert all(e.shape == (2,) for e in shape.elements)


def test_records():
    shape = DEFAULT_DESCRIBER.describe(_Record(2, 1))
    assert shape.kind is ShapeKind.RECORD
    assert shape.fields == (('b', 2), ('a', 1), ('tags', []))

    assert DEFAULT_DESCRIBER.describe(_Plain()).field_names == ('second', 'first')
    assert DEFAULT_DESCRIBER.describe(_Pair(1, 2)).fields == (('left', 1), ('right', 2))
    assert DEFAULT_DESCRIBER.describe(_Slotted()).fields == (('x', 1), ('_Slotted__secret', 2))
    assert DEFAULT_DESCRIBER.describe(_SlottedChild()).field_names == ('x', '_Slotted__secret', 'extra')
    assert DEFAULT_DESCRIBER.describe(_HalfSlotted()).fields == (('x', 1), ('y', UNSET))
    assert _kind(UNSET) is ShapeKind.SCALAR

    shape = DEFAULT_DESCRIBER.describe(_Empty())
    assert shape.kind is ShapeKind.RECORD and shape.fields == ()


def test_describer_protocol():
    assert isinstance(DefaultShapeDescriber(), ShapeDescriber)


def test_type_ancestry():
    assert type_ancestry(bool) == (bool, int, object)
    assert type_ancestry(object) == (object,)

    class Mixin:
        pass

    class Child(_Plain, Mixin):
        pass

    assert type_ancestry(Child) == (Child, _Plain, object)
