
import pathlib
import ipaddress

import pytest

from argtree import (Validator,
                     RangeValidator,
                     ChoicesValidator,
                     ConversionError,
                     register_type,
                     get_validator)
from argtree.values import DEFAULT_VALIDATOR, get_registered_types


def test_default_validator():
    assert get_validator(None) is DEFAULT_VALIDATOR
    assert DEFAULT_VALIDATOR.is_valid('anything')
    assert not DEFAULT_VALIDATOR.is_valid('')
    assert DEFAULT_VALIDATOR.convert('x') == 'x'


@pytest.mark.parametrize(
    "tag, good, bad",
    [('u8', ['0', '255', '+7'], ['-1', '256', 'x', '-0']),
     ('i8', ['-128', '127', '+3'], ['-129', '128', ' 3 ', '1_0']),
     ('int', ['-12', '+3', '0'], ['1_000', ' 3 ', '3.0', '', '0x1f']),
     ('u64', ['18446744073709551615'], ['18446744073709551616', '-1']),
     ('usize', ['0'], ['-1']),
     ('i128', [str(-2 ** 127)], [str(2 ** 127)]),
     ('f64', ['1.5', '-2', '1e3'], ['one']),
     ('bool', ['true', 'False', 'TRUE'], ['yes', '1']),
     ('char', ['x'], ['xy', '']),
     ('ip_address', ['127.0.0.1', '::1'], ['localhost'])]
)
def test_type_tags(tag, good, bad):
    validator = get_validator(tag)
    assert validator.type_tag == tag
    for raw in good:
        assert validator.is_valid(raw), raw
    for raw in bad:
        assert not validator.is_valid(raw), raw


def test_convert():
    assert get_validator('u64').convert('3') == 3
    assert get_validator('bool').convert('True') is True
    assert get_validator('path').convert('/tmp') == pathlib.Path('/tmp')
    assert get_validator('ip_address').convert('10.0.0.1') == ipaddress.ip_address('10.0.0.1')

    # compatible types
    assert get_validator('u8').convert('7', int) == 7
    assert get_validator('bool').convert('false', int) is False
    assert get_validator('path').convert('a', pathlib.PurePath) == pathlib.Path('a')

    # mismatched types
    with pytest.raises(ConversionError, match='invalid type requested'):
        get_validator('u64').convert('3', str)
    with pytest.raises(ConversionError, match='invalid type requested'):
        get_validator('string').convert('3', int)

    # no declared type, the requested one is applied
    assert get_validator('ip_address').convert('10.0.0.1', str) == '10.0.0.1'

    with pytest.raises(ConversionError, match='failed to convert'):
        get_validator('u8').convert('300')


def test_python_types():
    assert get_validator(int) is get_validator('int')
    assert get_validator(str) is get_validator('string')
    assert get_validator(pathlib.Path).type_tag == 'path'
    assert get_validator(int).label == 'integer'

    class Color(object):
        def __init__(self, text):
            if text not in ('red', 'blue'):
                raise ValueError('not a color: %r' % text)
            self.text = text

    validator = get_validator(Color)
    assert validator.type_tag is None
    assert validator.target_type is Color
    assert validator.is_valid('red')
    assert not validator.is_valid('green')
    assert validator.convert('blue').text == 'blue'

    with pytest.raises(TypeError):
        get_validator(5)
    with pytest.raises(ValueError, match='unknown type tag'):
        get_validator('u7')


def test_register_type():
    def _parse_hex(text):
        return int(text, 16)

    validator = register_type('test_hex', _parse_hex, int)
    assert 'test_hex' in get_registered_types()
    assert get_validator('test_hex') is validator
    assert validator.convert('ff') == 255

    with pytest.raises(ValueError, match='already registered'):
        register_type('test_hex', _parse_hex)
    with pytest.raises(ValueError):
        register_type('', _parse_hex)


def test_range_validator():
    port = RangeValidator(1, 65535)
    assert port.type_tag == 'int'
    assert port.is_valid('80')
    assert not port.is_valid('0')
    assert not port.is_valid('http')
    assert port.convert('443') == 443

    ratio = RangeValidator(0.0, 1.0, parse_as=float)
    assert ratio.is_valid('0.5')
    assert not ratio.is_valid('1.5')

    with pytest.raises(ValueError):
        RangeValidator(10, 1)


def test_choices_validator():
    color = ChoicesValidator(['red', 'blue', 'green'])
    assert color.is_valid('red')
    assert not color.is_valid('Red')
    assert color.label == 'one of red, blue, green'
    assert color.type_tag == 'string'

    level = ChoicesValidator([1, 2, 3], parse_as=int)
    assert level.choices == ['1', '2', '3']
    assert level.convert('2') == 2
    assert not level.is_valid('4')

    with pytest.raises(ValueError):
        ChoicesValidator([])
    with pytest.raises(ValueError):
        ChoicesValidator(['x'], parse_as=int)


def test_validator_repr():
    assert repr(get_validator('u8')) == "Validator('u8')"
    assert repr(Validator(len)).startswith('Validator(<built-in function len>')
    with pytest.raises(TypeError):
        Validator('not callable')
