"""
Data model for the output of a recursive comparison: paths, differences, and the collector that gathers them
"""

from collections.abc import Sequence
from dataclasses import dataclass
from .representation import render_value
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from typing import Any, Dict, Iterator, List, Tuple


@dataclass(frozen=True)
class Path:
    """
    Location of a node inside the compared graphs, as a sequence of segments.

    Field names are stored as-is. Elements of sequences and values of maps get synthetic segments wrapped in
    brackets ('[0]', "['key']"), which are rendered without a leading dot: `friends[0].home.address.number`.
    """

    segments: 'Tuple[str, ...]' = ()

    @classmethod
    def of(cls, *segments: 'str') -> 'Path':
        return cls(tuple(segments))

    def child(self, name: 'str') -> 'Path':
        """Path of the field `name` below this one"""
        return Path(self.segments + (name,))

    def element(self, index: 'int') -> 'Path':
        """Path of the element at `index` of the sequence at this path"""
        return Path(self.segments + ('[%d]' % index,))

    def key(self, key: 'Any') -> 'Path':
        """Path of the value stored under `key` in the map at this path"""
        return Path(self.segments + ('[%r]' % (key,),))

    @property
    def dotted(self) -> 'str':
        parts = []
        for segment in self.segments:
            if parts and not _is_synthetic(segment):
                parts.append('.')
            parts.append(segment)
        return ''.join(parts)

    @property
    def field_path(self) -> 'str':
        """The dotted path with all synthetic element/key segments removed"""
        return '.'.join(s for s in self.segments if not _is_synthetic(s))

    def __bool__(self) -> 'bool':
        return bool(self.segments)

    def __str__(self) -> 'str':
        return self.dotted


def _is_synthetic(segment: 'str') -> 'bool':
    return segment.startswith('[')


@dataclass(frozen=True)
class Difference:
    """
    One discrepancy between the actual and expected graphs.

    `show_kind` is set when the two values only differ by their concrete container kind (eg: a sorted set against a
    hashed set holding the same elements), so renderers must make the type visible.
    """

    path: 'Path'
    actual: 'Any'
    expected: 'Any'
    show_kind: 'bool' = False

    @property
    def path_str(self) -> 'str':
        return self.path.dotted

    def to_dict(self) -> 'Dict[str, str]':
        return {
            'path': self.path.dotted,
            'actual': render_value(self.actual, show_kind=self.show_kind),
            'expected': render_value(self.expected, show_kind=self.show_kind),
        }

    def describe(self) -> 'str':
        rendered = self.to_dict()
        return "Path to difference: <%s>\n- actual  : %s\n- expected: %s" % \
            (rendered['path'], rendered['actual'], rendered['expected'])


class DifferenceSet(Sequence):
    """Immutable, ordered result of one comparison. Empty means the values are equal."""

    def __init__(self, differences: 'Tuple[Difference, ...]' = ()):
        self._differences = tuple(differences)

    def __getitem__(self, index):
        return self._differences[index]

    def __len__(self) -> 'int':
        return len(self._differences)

    def __iter__(self) -> 'Iterator[Difference]':
        return iter(self._differences)

    def __eq__(self, other: 'Any') -> 'bool':
        if isinstance(other, DifferenceSet):
            return self._differences == other._differences
        if isinstance(other, (list, tuple)):
            return self._differences == tuple(other)
        return NotImplemented

    def __repr__(self) -> 'str':
        return 'DifferenceSet(%r)' % (list(self._differences),)

    def paths(self) -> 'List[str]':
        return [d.path.dotted for d in self._differences]

    def to_dicts(self) -> 'List[Dict[str, str]]':
        return [d.to_dict() for d in self._differences]

    def describe(self) -> 'str':
        return '\n\n'.join(d.describe() for d in self._differences)


class DifferenceCollector:
    """Append-only accumulator of differences, in discovery order"""

    def __init__(self):
        self._differences = []

    def add(self, path: 'Path', actual: 'Any', expected: 'Any', show_kind: 'bool' = False) -> 'Difference':
        difference = Difference(path, actual, expected, show_kind)
        self._differences.append(difference)
        return difference

    def __len__(self) -> 'int':
        return len(self._differences)

    def freeze(self) -> 'DifferenceSet':
        return DifferenceSet(tuple(self._differences))
