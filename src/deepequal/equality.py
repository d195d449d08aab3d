"""
Recursive, field by field comparison of object graphs

Handled shapes (see :mod:`deepequal.shapes`):
    - None
    - scalars: singleton objects, bool, numbers (including numpy scalars), str, bytes-like, range, type, enum,
      calendar values, and any other standard library non-container type (compared with their own __eq__)
    - ordered sequences: list, tuple, deque, numpy ndarray, and other Sequence types
    - unordered collections: set, frozenset, dict keys/values/items views, and sorted sets
    - keyed maps: dict and other Mapping types, including sorted maps
    - records: dataclasses, namedtuples, objects with __slots__ and/or a __dict__. Their own __eq__ is never used.

Comparator overrides bound to field paths or types (see :mod:`deepequal.comparators`) take precedence over all of the
above.
"""

import logging
import numpy as np
from collections import ChainMap
from .comparators import ComparatorRegistry, is_calendar, same_instant
from .differences import DifferenceCollector, Path
from .errors import EqualityCheckingError, EqualityError, TypeMismatchError
from .representation import limit_str
from .shapes import DEFAULT_DESCRIBER, Ordering, ShapeKind
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from typing import Any, Mapping, Optional, Sequence
    from .comparators import Comparator
    from .differences import DifferenceSet
    from .shapes import Shape, ShapeDescriber


logger = logging.getLogger(__name__)

_BOOLEAN_TYPES = (bool, np.bool_)
_CONTAINER_KINDS = (ShapeKind.SEQUENCE, ShapeKind.COLLECTION, ShapeKind.MAP)


def compare(actual: 'Any', expected: 'Any', field_comparators: 'Optional[Mapping[str, Comparator]]' = None,
            type_comparators: 'Optional[Mapping[type, Comparator]]' = None,
            registry: 'Optional[ComparatorRegistry]' = None,
            describer: 'Optional[ShapeDescriber]' = None) -> 'DifferenceSet':
    """
    Compares `actual` against `expected` field by field, recursively, and returns all differences found.

    Both values are walked in lock-step. Records are compared on the fields declared by `actual`, sequences element by
    element, sets and maps independently of their iteration order. Cycles in the graphs are handled: a pair of
    (actual, expected) containers is only ever compared once per call.

    NOTE: records are never compared using their own __eq__ implementation, only their fields are.

    Args:
        actual (Any): the value under test
        expected (Any): the value `actual` should be equal to
        field_comparators (Optional[Mapping[str, Comparator]]): comparators by dotted field path, eg: {'height': ...}.
            They take precedence over type comparators.
        type_comparators (Optional[Mapping[type, Comparator]]): comparators by type, also used for subclasses
        registry (Optional[ComparatorRegistry]): a pre-built registry. Comparators passed with `field_comparators` or
            `type_comparators` are added on top of a copy of it.
        describer (Optional[ShapeDescriber]): describes the structure of values. Defaults to
            :class:`~deepequal.shapes.DefaultShapeDescriber`

    Returns:
        DifferenceSet: the differences in discovery order, empty if the values are equal

    Raises:
        TypeMismatchError: if a record in `expected` does not declare all fields of the matching record in `actual`
        EqualityCheckingError: if a comparator or the shape describer raised an unexpected error
    """
    comparison = _Comparison(_build_registry(registry, field_comparators, type_comparators),
                             describer if describer is not None else DEFAULT_DESCRIBER)

    logger.debug("Comparing %s against %s", type(actual).__name__, type(expected).__name__)
    differences = comparison.run(actual, expected)
    logger.debug("Comparison found %d difference(s)", len(differences))
    return differences


def equal(actual: 'Any', expected: 'Any', field_comparators: 'Optional[Mapping[str, Comparator]]' = None,
          type_comparators: 'Optional[Mapping[type, Comparator]]' = None,
          registry: 'Optional[ComparatorRegistry]' = None, describer: 'Optional[ShapeDescriber]' = None,
          raise_err: 'bool' = False) -> 'bool':
    """
    Boolean form of :func:`compare`.

    Args:
        raise_err (bool): if True, then an ``EqualityError`` listing every difference is raised instead of returning
            False. Defaults to False.
        others: see :func:`compare`
    """
    differences = compare(actual, expected, field_comparators=field_comparators, type_comparators=type_comparators,
                          registry=registry, describer=describer)
    if differences:
        if raise_err:
            raise EqualityError(actual, expected, differences)
        return False
    return True


def _build_registry(registry, field_comparators, type_comparators):
    if registry is None:
        return ComparatorRegistry(field_comparators, type_comparators)
    if not field_comparators and not type_comparators:
        return registry

    registry = registry.copy()
    for path, comparator in (field_comparators or {}).items():
        registry.register_for_path(comparator, path)
    for cls, comparator in (type_comparators or {}).items():
        registry.register_for_type(comparator, cls)
    return registry


class _Comparison:
    """
    State of one top-level comparison: the differences found so far and the (actual, expected) pairs already visited.

    Visited pairs are never removed: once a pair of containers has been entered, meeting it again anywhere in the
    graphs counts as equal. The visited dict also keeps both objects alive, so that their ids cannot be reused by
    temporary objects (eg: numpy sub-arrays) for the rest of the comparison. Probes get a child map layered on top of
    the parent one, so their pairs never leak into the parent comparison.
    """

    def __init__(self, registry: 'ComparatorRegistry', describer: 'ShapeDescriber',
                 visited: 'Optional[ChainMap]' = None):
        self.registry = registry
        self.describer = describer
        self.visited = ChainMap() if visited is None else visited
        self.collector = DifferenceCollector()

    def run(self, actual: 'Any', expected: 'Any', path: 'Path' = Path()) -> 'DifferenceSet':
        self._visit(path, actual, expected)
        return self.collector.freeze()

    def _visit(self, path, actual, expected):
        # Same object, nothing to compare (comparators are not consulted either)
        if actual is expected:
            return

        pair = (id(actual), id(expected))
        if pair in self.visited:
            logger.debug("Pair at path <%s> was already visited, skipping", path)
            return

        if actual is None or expected is None:
            self._visit_null(path, actual, expected)
            return

        comparator = self.registry.resolve(path, type(actual))
        if comparator is not None:
            self._apply_comparator(path, comparator, actual, expected)
            return

        actual_shape, expected_shape = self._describe(actual), self._describe(expected)

        if actual_shape.kind is ShapeKind.SCALAR and expected_shape.kind is ShapeKind.SCALAR:
            if not self._scalars_equal(actual, expected):
                self.collector.add(path, actual, expected)
            return

        if actual_shape.kind is not expected_shape.kind:
            # Two containers of different kinds may render alike ([1, 2] vs {1, 2}), so show their types
            show_kind = actual_shape.kind in _CONTAINER_KINDS and expected_shape.kind in _CONTAINER_KINDS
            self.collector.add(path, actual, expected, show_kind=show_kind)
            return

        self.visited[pair] = (actual, expected)

        if actual_shape.kind is ShapeKind.RECORD:
            self._visit_record(path, actual, expected, actual_shape, expected_shape)
        elif actual_shape.kind is ShapeKind.SEQUENCE:
            self._visit_elements(path, actual, expected, actual_shape.elements, expected_shape.elements)
        elif actual_shape.kind is ShapeKind.COLLECTION:
            self._visit_collection(path, actual, expected, actual_shape, expected_shape)
        elif actual_shape.kind is ShapeKind.MAP:
            self._visit_map(path, actual, expected, actual_shape, expected_shape)
        else:
            raise EqualityCheckingError("Unknown shape kind %s for value %s" % (actual_shape.kind, limit_str(repr(actual))))

    def _visit_null(self, path, actual, expected):
        # A comparator may still accept None against a value, look it up with the type of the value that is present
        present = expected if actual is None else actual
        comparator = self.registry.resolve(path, type(present))
        if comparator is not None:
            self._apply_comparator(path, comparator, actual, expected)
        else:
            self.collector.add(path, actual, expected)

    def _apply_comparator(self, path, comparator, actual, expected):
        logger.debug("Using comparator %r at path <%s>", comparator, path)
        try:
            is_equal = comparator(actual, expected)
        except Exception as e:
            raise EqualityCheckingError("Comparator %r failed at path <%s>\nactual: %s\nexpected: %s" %
                (comparator, path, limit_str(repr(actual)), limit_str(repr(expected)))) from e
        if not is_equal:
            self.collector.add(path, actual, expected)

    def _describe(self, value: 'Any') -> 'Shape':
        try:
            return self.describer.describe(value)
        except Exception as e:
            raise EqualityCheckingError("Could not determine the shape of value of type %s: %s" %
                (repr(type(value).__name__), limit_str(repr(value)))) from e

    def _scalars_equal(self, actual, expected):
        # Calendar values of different precision are equal if they denote the same instant, in both directions
        if is_calendar(actual) and is_calendar(expected):
            return same_instant(actual, expected)

        # Bool's are not int's
        if isinstance(actual, _BOOLEAN_TYPES) != isinstance(expected, _BOOLEAN_TYPES):
            return False

        try:
            result = actual == expected
            if isinstance(result, np.ndarray):
                result = result.all()
            return bool(result)
        except Exception as e:
            raise EqualityCheckingError("Could not determine equality between objects\na: %s\nb: %s" %
                (limit_str(repr(actual)), limit_str(repr(expected)))) from e

    def _visit_record(self, path, actual, expected, actual_shape, expected_shape):
        expected_fields = dict(expected_shape.fields)
        missing = [name for name in actual_shape.field_names if name not in expected_fields]
        if missing:
            logger.debug("%s at path <%s> lacks fields %s of %s", type(expected).__name__, path, missing,
                         type(actual).__name__)
            raise TypeMismatchError(type(actual), type(expected), missing, path)

        for name, value in actual_shape.fields:
            self._visit(path.child(name), value, expected_fields[name])

    def _visit_elements(self, path, actual, expected, actual_elements, expected_elements):
        # Differing lengths are reported once, for the whole container
        if len(actual_elements) != len(expected_elements):
            self.collector.add(path, actual, expected)
            return

        for i, (actual_element, expected_element) in enumerate(zip(actual_elements, expected_elements)):
            self._visit(path.element(i), actual_element, expected_element)

    def _visit_collection(self, path, actual, expected, actual_shape, expected_shape):
        if actual_shape.ordering is not expected_shape.ordering:
            self._add_kind_mismatch(path, actual, expected)
        elif actual_shape.ordering is Ordering.SORTED:
            self._visit_elements(path, actual, expected, actual_shape.elements, expected_shape.elements)
        elif self._match_unordered(path, actual_shape.elements, expected_shape.elements) is None:
            self.collector.add(path, actual, expected)

    def _visit_map(self, path, actual, expected, actual_shape, expected_shape):
        if actual_shape.ordering is not expected_shape.ordering:
            self._add_kind_mismatch(path, actual, expected)
            return

        actual_keys = [k for k, _ in actual_shape.entries]
        expected_keys = [k for k, _ in expected_shape.entries]

        if actual_shape.ordering is Ordering.SORTED:
            # Sorted maps must hold equal keys in the same order
            matched = list(range(len(expected_keys))) if len(actual_keys) == len(expected_keys) and \
                all(self._probe(path, a, e) for a, e in zip(actual_keys, expected_keys)) else None
        else:
            matched = self._match_unordered(path, actual_keys, expected_keys)

        if matched is None:
            self.collector.add(path, actual, expected)
            return

        for (key, actual_value), j in zip(actual_shape.entries, matched):
            self._visit(path.key(key), actual_value, expected_shape.entries[j][1])

    def _add_kind_mismatch(self, path, actual, expected):
        logger.debug("Containers at path <%s> differ in kind: %s vs %s", path, type(actual).__name__,
                     type(expected).__name__)
        self.collector.add(path, actual, expected, show_kind=True)

    def _match_unordered(self, path: 'Path', actual_elements: 'Sequence[Any]',
                         expected_elements: 'Sequence[Any]') -> 'Optional[Sequence[int]]':
        """
        Matches every actual element with a distinct, equal expected element (a multiset match).

        Equality under a comparator need not be transitive (eg: a tolerance), so elements are paired with augmenting
        paths over the probe results rather than first fit.

        Returns the index in `expected_elements` matched by each actual element, or None if the elements differ.
        """
        if len(actual_elements) != len(expected_elements):
            return None

        # Scalars of the exact same type without a comparator can be paired off by hash first, their equality is
        # an equivalence so the pairing cannot block another one. Everything else goes through probes.
        by_value = {}
        for j, element in enumerate(expected_elements):
            key = self._scalar_key(element)
            if key is not None:
                by_value.setdefault(key, []).append(j)

        matched = [None] * len(actual_elements)
        owner = {}
        for i, element in enumerate(actual_elements):
            key = self._scalar_key(element)
            if key is not None and by_value.get(key):
                j = by_value[key].pop()
                matched[i] = j
                owner[j] = i

        candidates = [j for j in range(len(expected_elements)) if j not in owner]
        probed = {}

        def is_match(i, j):
            if (i, j) not in probed:
                probed[(i, j)] = self._probe(path, actual_elements[i], expected_elements[j])
            return probed[(i, j)]

        def augment(i, seen):
            for j in candidates:
                if j in seen or not is_match(i, j):
                    continue
                seen.add(j)
                if j not in owner or augment(owner[j], seen):
                    matched[i] = j
                    owner[j] = i
                    return True
            return False

        for i in range(len(actual_elements)):
            if matched[i] is None and not augment(i, set()):
                return None

        return matched

    def _scalar_key(self, value):
        if self._describe(value).kind is not ShapeKind.SCALAR or is_calendar(value):
            return None
        if self.registry.resolve_for_type(type(value)) is not None:
            return None
        try:
            key = (type(value), value)
            hash(key)
        except TypeError:
            return None
        return key

    def _probe(self, path, actual, expected):
        """
        Whether two values are equal, without recording any difference in this comparison.

        A TypeMismatchError while probing only means these two elements are not a match.
        """
        if actual is expected:
            return True
        probe = _Comparison(self.registry, self.describer, self.visited.new_child())
        try:
            return not probe.run(actual, expected, path)
        except TypeMismatchError:
            return False
