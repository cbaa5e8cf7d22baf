
import pytest

from argtree import get_distance, get_suggestions
from argtree.suggest import format_suggestions


@pytest.mark.parametrize(
    "source, target, expected",
    [('times', 'times', 0),
     ('times', 'tims', 1),
     ('times', 'tiems', 1),
     ('times', 'timer', 1),
     ('times', 'TIMES', 0),
     ('', 'abc', 3),
     ('abc', '', 3),
     ('ca', 'abc', 3),
     ('kitten', 'sitting', 3)]
)
def test_distance(source, target, expected):
    assert get_distance(source, target) == expected


def test_distance_case():
    assert get_distance('Times', 'times', ignore_case=False) == 1


def test_suggestions():
    candidates = ['times', 'timeout', 'tags', 'help', 'h', 't']
    assert get_suggestions('tims', candidates) == ['times', 'tags']
    assert get_suggestions('tag', candidates) == ['tags', 't']
    assert get_suggestions('xyzzy', candidates) == []

    # closest first, then alphabetical
    assert get_suggestions('ab', ['ac', 'aa', 'xb', 'abcd']) == ['aa', 'ac', 'xb', 'abcd']
    assert get_suggestions('ab', ['ac', 'aa', 'xb', 'abcd'], max_count=2) == ['aa', 'ac']
    assert get_suggestions('ab', ['ac', 'aa', 'xb', 'abcd'], max_distance=1) == ['aa', 'ac', 'xb']

    # the name itself and duplicates are skipped
    assert get_suggestions('times', ['times', 'timer', 'timer']) == ['timer']


def test_format_suggestions():
    assert format_suggestions([]) == ''
    assert format_suggestions(['times']) == 'did you mean "times"?'
    assert (format_suggestions(['times', 't'], formatter=lambda s: '-' * min(len(s), 2) + s)
            == 'did you mean one of: "--times", "-t"?')
