"""
Exceptions raised by the recursive comparison
"""

from .representation import render_value
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from typing import Any, Iterable, Optional
    from .differences import DifferenceSet, Path


class DeepEqualityError(Exception):
    """Base class for every error raised by :mod:`deepequal`"""


class TypeMismatchError(DeepEqualityError):
    """
    Raised when the expected value does not declare every field the actual value declares.

    This is a hard failure of the whole comparison: the shapes cannot be compared field by field, so no
    differences are returned. The missing field names are available as `missing_fields`.
    """

    def __init__(self, actual_type: 'type', expected_type: 'type', missing_fields: 'Iterable[str]',
                 path: 'Optional[Path]' = None):
        self.actual_type = actual_type
        self.expected_type = expected_type
        self.missing_fields = frozenset(missing_fields)
        self.path = path

        message = "%s does not declare all %s fields, it lacks these: [%s]" % \
            (expected_type.__name__, actual_type.__name__, ', '.join(sorted(self.missing_fields)))
        if path:
            message += " (at path <%s>)" % path
        super().__init__(message)


class EqualityCheckingError(DeepEqualityError):
    """Error raised whenever there is an unexpected problem attempting to check equality between two objects"""


class EqualityError(DeepEqualityError, AssertionError):
    """Error raised whenever an :func:`~deepequal.equality.equal` check finds differences and `raise_err=True`"""

    def __init__(self, actual: 'Any', expected: 'Any', differences: 'DifferenceSet'):
        self.actual = actual
        self.expected = expected
        self.differences = differences
        super().__init__("\nExpecting actual:\n  %s\nto be equal to:\n  %s\n"
                         "when recursively comparing field by field, but found the following difference(s):\n\n%s" %
                         (render_value(actual), render_value(expected), differences.describe()))
