"""
Rendering of compared values for difference reports
"""

from collections.abc import Mapping, Set
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from typing import Any


# Rendered values longer than this are cut short
MAX_REPR_LENGTH = 1000


def limit_str(text: 'str', limit: 'int' = MAX_REPR_LENGTH) -> 'str':
    """Cuts `text` down to `limit` characters, marking the cut with '...'"""
    return text if len(text) <= limit else (text[:limit] + '...')


def render_value(value: 'Any', show_kind: 'bool' = False, limit: 'int' = MAX_REPR_LENGTH) -> 'str':
    """
    Renders a value the way difference reports show it.

    :param value: the value to render
    :param show_kind: if True, the concrete type of the value is appended, eg: "['bar', 'foo'] (SortedSet)". Sets and
        maps are then rendered by their contents in iteration order so that two containers holding the same elements
        only differ by the type name
    :param limit: maximum length of the rendered contents
    """
    if not show_kind:
        return limit_str(repr(value), limit)

    if isinstance(value, Mapping):
        contents = '{%s}' % ', '.join('%r: %r' % (k, v) for k, v in value.items())
    elif isinstance(value, Set):
        contents = '[%s]' % ', '.join(repr(e) for e in value)
    else:
        contents = repr(value)

    return '%s (%s)' % (limit_str(contents, limit), type(value).__name__)
