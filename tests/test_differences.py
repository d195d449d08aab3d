"""
Tests for the deepequal.differences and deepequal.representation files
"""

from deepequal.differences import Difference, DifferenceCollector, DifferenceSet, Path
from deepequal.representation import limit_str, render_value
from sortedcontainers import SortedSet


def test_path_rendering():
    assert Path.of('home', 'address', 'number').dotted == 'home.address.number'
    assert str(Path.of('friends').element(0).child('name')) == 'friends[0].name'
    assert Path().element(3).child('x').dotted == '[3].x'
    assert Path.of('map').key('a').dotted == "map['a']"
    assert Path.of('map').key(1).element(2).dotted == 'map[1][2]'
    assert Path().dotted == ''
    assert not Path()


def test_field_path_drops_synthetic_segments():
    path = Path.of('friends').element(0).child('home').key('x').child('number')
    assert path.field_path == 'friends.home.number'


def test_paths_are_immutable_on_descent():
    parent = Path.of('home')
    child = parent.child('address')
    assert parent.segments == ('home',)
    assert child.segments == ('home', 'address')


def test_collector_keeps_discovery_order():
    collector = DifferenceCollector()
    collector.add(Path.of('b'), 1, 2)
    collector.add(Path.of('a'), 'x', 'y')
    collector.add(Path.of('b', 'c'), None, 3)

    differences = collector.freeze()
    assert isinstance(differences, DifferenceSet)
    assert differences.paths() == ['b', 'a', 'b.c']
    assert len(collector) == 3

    # The frozen set does not see later additions
    collector.add(Path.of('d'), 0, 1)
    assert len(differences) == 3


def test_difference_set_output():
    differences = DifferenceSet((Difference(Path.of('name'), 'Jack', 'John'), Difference(Path.of('age'), 1, None)))

    assert differences.to_dicts() == [
        {'path': 'name', 'actual': "'Jack'", 'expected': "'John'"},
        {'path': 'age', 'actual': '1', 'expected': 'None'},
    ]
    assert differences.describe() == ("Path to difference: <name>\n- actual  : 'Jack'\n- expected: 'John'\n\n"
                                      "Path to difference: <age>\n- actual  : 1\n- expected: None")
    assert differences == list(differences)
    assert differences[1].path_str == 'age'
    assert not DifferenceSet()


def test_render_value():
    assert render_value([1, 2]) == '[1, 2]'
    assert render_value({'bar'}, show_kind=True) == "['bar'] (set)"
    assert render_value(SortedSet(['foo', 'bar']), show_kind=True) == "['bar', 'foo'] (SortedSet)"
    assert render_value({1: True}, show_kind=True) == '{1: True} (dict)'
    assert render_value((1,), show_kind=True) == '(1,) (tuple)'


def test_limit_str():
    assert limit_str('abc', limit=5) == 'abc'
    assert limit_str('a' * 10, limit=5) == 'aaaaa...'
    assert render_value('a' * 2000).endswith('...')
