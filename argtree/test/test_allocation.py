
from itertools import product

import pytest

from argtree import (Argument,
                     Option,
                     Command,
                     allocate_counts,
                     NotEnoughArguments,
                     TooManyArguments)


def _args(*slot_bounds):
    ret = []
    for i, bounds in enumerate(slot_bounds):
        min_count, max_count = bounds[:2]
        default = bounds[2] if len(bounds) > 2 else None
        ret.append(Argument('arg%s' % i, min_count=min_count,
                            max_count=max_count, default=default))
    return ret


@pytest.mark.parametrize(
    "slot_bounds, count, expected",
    [([], 0, []),
     ([(1, 1)], 1, [1]),
     ([(1, 1), (1, None)], 4, [1, 3]),
     ([(0, 1), (0, 1)], 1, [0, 1]),
     ([(0, 2), (1, 2)], 3, [1, 2]),
     ([(1, 3), (1, 3)], 5, [2, 3]),
     ([(1, 1), (0, None)], 1, [1, 0]),
     ([(1, 1, 'x'), (1, 1)], 1, [0, 1]),
     ([(1, 1), (1, 1, 'x')], 1, [1, 0]),
     ([(1, 1, 'x'), (1, 1, 'y')], 1, [1, 0]),
     ([(1, 1, 'x'), (1, 1, 'y'), (1, 1)], 2, [1, 0, 1]),
     ([(2, 2, ['a', 'b']), (1, None)], 3, [2, 1]),
     ([(2, 2, ['a', 'b']), (1, None)], 1, [0, 1]),
     ([(2, 2, ['a', 'b']), (2, 10, ['c', 'd'])], 3, [0, 3])]
)
def test_allocate_counts(slot_bounds, count, expected):
    assert allocate_counts(_args(*slot_bounds), count) == expected


def test_many_defaults():
    slots = [Argument('arg%s' % i, default='x') for i in range(24)]
    assert allocate_counts(slots, 1) == [1] + [0] * 23
    assert allocate_counts(slots, 5) == [1] * 5 + [0] * 19
    assert allocate_counts(slots, 24) == [1] * 24

    slots.append(Argument('last'))
    assert allocate_counts(slots, 3) == [1, 1] + [0] * 22 + [1]
    with pytest.raises(NotEnoughArguments) as exc_info:
        allocate_counts(slots, 0, owner=Command(None, 'app'))
    assert exc_info.value.argument is slots[-1]


def test_too_many():
    slots = _args((1, 1), (0, 2))
    with pytest.raises(TooManyArguments) as exc_info:
        allocate_counts(slots, 5, owner=Command(None, 'app'),
                        tokens=['a', 'b', 'c', 'd', 'e'])
    assert exc_info.value.extra == ['d', 'e']
    assert exc_info.value.expected_max == 3
    assert exc_info.value.actual == 5

    with pytest.raises(TooManyArguments, match='takes no values'):
        allocate_counts([], 1, owner=Option('verbose'), tokens=['x'])


def test_not_enough():
    slots = _args((1, 1), (2, 2))
    with pytest.raises(NotEnoughArguments) as exc_info:
        allocate_counts(slots, 2, owner=Command(None, 'app'))
    assert exc_info.value.argument is slots[1]
    assert exc_info.value.actual == 1
    assert 'too few values for argument "arg1" of command "app"' in str(exc_info.value)

    # the first slot without defaults is named, even with defaults elsewhere
    slots = _args((1, 1, 'x'), (3, 3))
    with pytest.raises(NotEnoughArguments) as exc_info:
        allocate_counts(slots, 2, owner=Command(None, 'app'))
    assert exc_info.value.argument is slots[1]

    slots = _args((1, None),)
    with pytest.raises(NotEnoughArguments, match='expected 1 or more values, got 0'):
        allocate_counts(slots, 0, owner=Command(None, 'app'))


def test_allocation_properties():
    bounds = [(0, 1), (1, 1), (1, 2), (2, 3), (0, None), (1, None)]
    for first, second in product(bounds, repeat=2):
        if first[1] is None:
            continue  # unbounded slots must be last
        slots = _args(first, second)
        total_min = first[0] + second[0]
        total_max = first[1] + second[1] if second[1] is not None else total_min + 4
        for count in range(total_min, total_max + 1):
            counts = allocate_counts(slots, count)
            assert sum(counts) == count
            for slot, slot_count in zip(slots, counts):
                assert slot.takes(slot_count)
            # surplus goes last
            assert counts[-1] >= min(slots[-1].max_count or count, count - first[0])


def test_validation_is_repeatable():
    cmd = Command(None, 'app')
    cmd.add('--port', Argument('port', validator='u16', default='80'))
    cmd.add(Argument('hosts', validator='ip_address', max_count=None))

    res = cmd.parse(['--port', '8080', '10.0.0.1', '::1'])
    for _ in range(2):
        for name in ('port', 'hosts'):
            arg = cmd.get_option(name).args[0] if name == 'port' else cmd.get_arg(name)
            for raw in res.get_raw(name):
                assert arg.validator.is_valid(raw)
    assert res.convert('port') == res.convert('port') == 8080
