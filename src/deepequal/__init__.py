from .comparators import (ComparatorRegistry, always_equal, at_precision, from_cmp, never_equal,
                          symmetric_date_comparator)
from .differences import Difference, DifferenceSet, Path
from .equality import compare, equal
from .errors import DeepEqualityError, EqualityCheckingError, EqualityError, TypeMismatchError
from .representation import render_value
from .shapes import UNSET, DefaultShapeDescriber, Shape, ShapeDescriber, ShapeKind

__all__ = ['compare', 'equal', 'ComparatorRegistry', 'always_equal', 'at_precision', 'from_cmp', 'never_equal',
           'symmetric_date_comparator', 'Difference', 'DifferenceSet', 'Path', 'DeepEqualityError',
           'EqualityCheckingError', 'EqualityError', 'TypeMismatchError', 'render_value', 'DefaultShapeDescriber',
           'Shape', 'ShapeDescriber', 'ShapeKind', 'UNSET']
__doc__ = """Recursive, cycle-safe, field by field comparison of object graphs."""
