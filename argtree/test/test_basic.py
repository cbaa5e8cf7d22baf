
import pytest

from argtree import Command, Option, Argument, SchemaError
from argtree.utils import (format_option_label,
                           identifier_to_flag,
                           option_to_identifier,
                           get_cardinalized_args_label,
                           get_count_text)


def test_cmd_name():

    def handler(result):
        return 0

    assert Command(handler).name == 'handler'
    Command(handler, name='ok_cmd')

    name_err_map = {'': 'non-zero length string',
                    5: 'non-zero length string',
                    'name_': 'without trailing dashes or underscores',
                    'name--': 'without trailing dashes or underscores',
                    'n?me': ('valid subcommand name must begin with a letter, and'
                             ' consist only of letters, digits, underscores, and'
                             ' dashes')}

    for name, err in name_err_map.items():
        with pytest.raises(SchemaError, match=err):
            Command(handler, name=name)

    return


def test_cmd_doc():

    def deploy(result):
        """Deploy the thing
        somewhere nice.

        More details here.
        """

    assert Command(deploy).doc == 'Deploy the thing somewhere nice.'
    assert Command(deploy, doc='custom').doc == 'custom'
    assert Command(None, 'grouper').doc == ''

    with pytest.raises(SchemaError):
        Command(None)  # no name to infer

    with pytest.raises(TypeError, match='unexpected keyword'):
        Command(deploy, flags=[])


def test_option_name():
    opt = Option('ok_name', Argument('value'))
    assert format_option_label(opt) == '--ok-name VALUE'
    assert format_option_label(Option('--times', Argument('n'), aliases='t')) == '--times / -t N'
    assert format_option_label(Option('verbose', aliases=['-v'])) == '--verbose / -v'

    with pytest.raises(ValueError, match='expected identifier.*'):
        assert identifier_to_flag('--flag')

    assert option_to_identifier('--Max-Count') == 'max_count'
    assert option_to_identifier('-V') == 'V'
    assert option_to_identifier('?') == '?'

    name_err_map = {'': 'non-zero length string',
                    5: 'non-zero length string',
                    'name_': 'without trailing dashes or underscores',
                    'name--': 'without trailing dashes or underscores',
                    'n?me': ('must begin with a letter.*and'
                             ' consist only of letters, digits, underscores, and'
                             ' dashes'),
                    '-~': 'expected valid option character'}

    for name, err in name_err_map.items():
        with pytest.raises(SchemaError, match=err):
            Option(name=name)

    with pytest.raises(SchemaError, match='duplicate name or alias'):
        Option('--times', aliases=['t', '-t'])


def test_identifier_to_flag():
    assert identifier_to_flag('max_count') == '--max-count'
    assert identifier_to_flag('v') == '-v'
    assert identifier_to_flag('V') == '-V'


@pytest.mark.parametrize(
    "min_count, max_count, expected",
    [(1, 1, 'value'),
     (0, 1, '[value]'),
     (0, None, '[values ...]'),
     (1, None, 'value [values ...]'),
     (2, 2, 'value value'),
     (1, 3, 'value [values ...]')]
)
def test_args_label(min_count, max_count, expected):
    assert get_cardinalized_args_label('value', min_count, max_count) == expected


def test_count_text():
    assert get_count_text(1, 1) == '1 value'
    assert get_count_text(2, 2) == '2 values'
    assert get_count_text(0, 1) == 'up to 1 value'
    assert get_count_text(0, None) == 'any number of values'
    assert get_count_text(1, None) == '1 or more values'
    assert get_count_text(2, 4) == '2 to 4 values'
