"""
Comparator overrides for the recursive comparison.

A comparator is any callable `comparator(actual, expected) -> bool` returning True when both values should be
considered equal. Comparators can be bound to a field path ('home.address.number') or to a type; the registry
resolves which one applies at a given point of the traversal.
"""

import logging
import numpy as np
from datetime import date, datetime, time
from .differences import Path
from .shapes import type_ancestry
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from typing import Any, Callable, Dict, Mapping, Optional, Union

    Comparator = Callable[[Any, Any], bool]


logger = logging.getLogger(__name__)


class ComparatorRegistry:
    """
    Holds comparators by exact field path and by type.

    Lookup order in :meth:`resolve` (first match wins):
        1. the comparator registered for the exact dotted path, then for the same path with element/key segments
           removed (so a comparator for 'friends.name' applies to the name of every friend)
        2. the comparator registered for the value's type, then for the nearest type in its linear ancestry
        3. None, meaning the default structural comparison applies

    Registration is expected to be done before comparing; the registry is only read during a comparison and can be
    shared between comparisons.
    """

    def __init__(self, field_comparators: 'Optional[Mapping[str, Comparator]]' = None,
                 type_comparators: 'Optional[Mapping[type, Comparator]]' = None):
        self._by_path: 'Dict[str, Comparator]' = {}
        self._by_type: 'Dict[type, Comparator]' = {}

        for path, comparator in (field_comparators or {}).items():
            self.register_for_path(comparator, path)
        for cls, comparator in (type_comparators or {}).items():
            self.register_for_type(comparator, cls)

    def register_for_path(self, comparator: 'Comparator', *paths: 'Union[str, Path]') -> 'ComparatorRegistry':
        """
        Registers `comparator` for each of the given dotted field paths. Returns self to allow chaining.

        :param comparator: callable(actual, expected) -> bool
        :param paths: dotted paths, eg: 'height', 'home.address.number'
        """
        _check_comparator(comparator)
        for path in paths:
            self._by_path[_normalize_path(path)] = comparator
            logger.debug("Registered comparator %r for path <%s>", comparator, path)
        return self

    def register_for_type(self, comparator: 'Comparator', *types: 'type') -> 'ComparatorRegistry':
        """Registers `comparator` for each of the given types (and their subclasses). Returns self to allow chaining."""
        _check_comparator(comparator)
        for cls in types:
            if not isinstance(cls, type):
                raise TypeError("Comparators can only be registered for types, not %s" % repr(cls))
            self._by_type[cls] = comparator
            logger.debug("Registered comparator %r for type %s", comparator, cls.__name__)
        return self

    def resolve(self, path: 'Union[str, Path]', actual_type: 'type') -> 'Optional[Comparator]':
        comparator = self.resolve_for_path(path)
        if comparator is None:
            comparator = self.resolve_for_type(actual_type)
        return comparator

    def resolve_for_path(self, path: 'Union[str, Path]') -> 'Optional[Comparator]':
        if not self._by_path:
            return None
        if not isinstance(path, Path):
            return self._by_path.get(str(path))

        comparator = self._by_path.get(path.dotted)
        if comparator is None:
            comparator = self._by_path.get(path.field_path)
        return comparator

    def resolve_for_type(self, actual_type: 'type') -> 'Optional[Comparator]':
        if not self._by_type:
            return None
        for cls in type_ancestry(actual_type):
            if cls in self._by_type:
                return self._by_type[cls]
        return None

    def copy(self) -> 'ComparatorRegistry':
        registry = ComparatorRegistry()
        registry._by_path.update(self._by_path)
        registry._by_type.update(self._by_type)
        return registry

    @property
    def field_comparators(self) -> 'Dict[str, Comparator]':
        return dict(self._by_path)

    @property
    def type_comparators(self) -> 'Dict[type, Comparator]':
        return dict(self._by_type)

    def __len__(self) -> 'int':
        return len(self._by_path) + len(self._by_type)

    def __repr__(self) -> 'str':
        return 'ComparatorRegistry(paths=%s, types=%s)' % \
            (sorted(self._by_path), sorted(cls.__name__ for cls in self._by_type))


def _check_comparator(comparator):
    if not callable(comparator):
        raise TypeError("Comparator must be callable, not %s" % repr(type(comparator).__name__))


def _normalize_path(path):
    dotted = str(path).strip()
    if dotted == '' or dotted.startswith('.') or dotted.endswith('.') or '..' in dotted:
        raise ValueError("Invalid field path: %s" % repr(path))
    return dotted


###########################
# Calendar value handling #
###########################


def is_calendar(value: 'Any') -> 'bool':
    return isinstance(value, (date, np.datetime64))


def to_instant(value: 'Any') -> 'Optional[datetime]':
    """
    Converts a date-like value into a datetime. Plain dates become midnight of that day, numpy datetime64 values are
    converted at microsecond precision. Returns None for values that do not denote an instant (eg: NaT).
    """
    if isinstance(value, np.datetime64):
        value = value.astype('datetime64[us]').item()
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    return None


def same_instant(a: 'Any', b: 'Any') -> 'bool':
    """Whether two calendar values denote the same instant, whatever their representation"""
    if isinstance(a, np.datetime64) and isinstance(b, np.datetime64):
        return bool(a == b)
    instant_a, instant_b = to_instant(a), to_instant(b)
    if instant_a is None or instant_b is None:
        return False
    return instant_a == instant_b


######################
# Stock comparators #
######################


class AtPrecision:
    """Considers two numbers equal when they are within `tolerance` of each other"""

    def __init__(self, tolerance: 'Any'):
        if tolerance < 0:
            raise ValueError("Tolerance must be non-negative, got %s" % repr(tolerance))
        self.tolerance = tolerance

    def __call__(self, actual: 'Any', expected: 'Any') -> 'bool':
        if actual is None or expected is None:
            return actual is expected
        return abs(actual - expected) <= self.tolerance

    def __repr__(self) -> 'str':
        return 'at_precision(%r)' % (self.tolerance,)


def at_precision(tolerance: 'Any') -> 'AtPrecision':
    return AtPrecision(tolerance)


def symmetric_date_comparator(actual: 'Any', expected: 'Any') -> 'bool':
    """Compares dates, datetimes and numpy datetime64 values by the instant they denote, in both directions"""
    if actual is None or expected is None:
        return actual is expected
    return same_instant(actual, expected)


def always_equal(actual: 'Any', expected: 'Any') -> 'bool':
    return True


def never_equal(actual: 'Any', expected: 'Any') -> 'bool':
    return False


def from_cmp(cmp: 'Callable[[Any, Any], int]') -> 'Comparator':
    """Adapts a three-way comparison function (negative, zero or positive result) into an equality comparator"""
    _check_comparator(cmp)

    def comparator(actual, expected):
        return cmp(actual, expected) == 0

    comparator.__name__ = 'from_cmp(%s)' % getattr(cmp, '__name__', repr(cmp))
    return comparator
