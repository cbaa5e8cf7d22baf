"""Validation and conversion of raw argument values.

A Validator pairs a conversion function with an optional type tag,
the name used for the type when a Command tree is written out as a
document. During parsing, validators are only used to check that a raw
string *could* be converted. The actual typed conversion is deferred
until a caller asks for it through the ParseResult.
"""

import re
import pathlib
import ipaddress
from collections import OrderedDict

from argtree.errors import ConversionError


FRIENDLY_TYPE_NAMES = {int: 'integer',
                       float: 'decimal',
                       bool: 'boolean',
                       str: 'string'}


class Validator(object):
    """Wraps a callable which takes a single raw string and returns
    the typed value, raising ValueError or TypeError when the string
    is not valid.

    Args:
       func (callable): The conversion function.
       type_tag (str): The registered name of this validator's type,
          used for serialization. Defaults to None, for validators
          which can't be represented in a document.
       target_type (type): The Python type produced by *func*, used to
          check typed conversion requests. Defaults to None, meaning
          any requested type is accepted.
       label (str): A friendly name for the expected type, used in
          error messages.

    Validators must be pure functions of their input.
    """
    def __init__(self, func, type_tag=None, target_type=None, label=None):
        if not callable(func):
            raise TypeError('expected callable for validator func, not: %r' % func)
        self.func = func
        self.type_tag = type_tag
        self.target_type = target_type
        if label is None:
            label = _get_label(type_tag, target_type, func)
        self.label = label

    def validate(self, raw):
        "Return the typed value for *raw*, raising ValueError if it is invalid."
        return self.func(raw)

    __call__ = validate

    def is_valid(self, raw):
        try:
            self.validate(raw)
        except Exception:
            return False
        return True

    def convert(self, raw, as_type=None):
        """Convert *raw* to its typed value, optionally asserting that
        the value can serve as an *as_type*.

        Raises ConversionError if the raw value does not validate, or
        if *as_type* is incompatible with this validator's target type.
        """
        if as_type is not None and self.target_type is not None:
            if not (isinstance(as_type, type) and issubclass(self.target_type, as_type)):
                raise ConversionError('invalid type requested, %r values convert to %s, not %s'
                                      % (raw, _type_name(self.target_type), _type_name(as_type)))
        try:
            value = self.validate(raw)
            if as_type is not None and self.target_type is None:
                value = as_type(value)
        except Exception as e:
            raise ConversionError('failed to convert %r to %s: %s'
                                  % (raw, _type_name(as_type) if as_type else self.label, e))
        return value

    def __repr__(self):
        cn = self.__class__.__name__
        if self.type_tag:
            return '%s(%r)' % (cn, self.type_tag)
        return '%s(%r)' % (cn, self.func)


def _type_name(type_):
    return getattr(type_, '__name__', repr(type_))


def _get_label(type_tag, target_type, func):
    if type_tag and type_tag not in _PYTHON_TYPE_TAGS.values():
        return type_tag
    if target_type in FRIENDLY_TYPE_NAMES:
        return FRIENDLY_TYPE_NAMES[target_type]
    if type_tag:
        return type_tag
    try:
        return func.__name__
    except AttributeError:
        return repr(func)


class RangeValidator(Validator):
    """Accepts values which parse as *parse_as* (an int, by default)
    and fall within *min_value* and *max_value*, inclusive.
    """
    def __init__(self, min_value, max_value, parse_as='int'):
        base = get_validator(parse_as)
        if not min_value < max_value:
            raise ValueError('expected min_value < max_value, not: %r >= %r'
                             % (min_value, max_value))
        self.base = base
        self.min_value = min_value
        self.max_value = max_value
        super(RangeValidator, self).__init__(self._parse, type_tag=base.type_tag,
                                             target_type=base.target_type,
                                             label=base.label)

    def _parse(self, text):
        value = self.base.validate(text)
        if not self.min_value <= value <= self.max_value:
            raise ValueError('%s is out of range: %s..%s'
                             % (value, self.min_value, self.max_value))
        return value

    def __repr__(self):
        cn = self.__class__.__name__
        return '%s(%r, %r, parse_as=%r)' % (cn, self.min_value, self.max_value, self.base)


class ChoicesValidator(Validator):
    """Parses a single value, limited to a set of *choices*. Choices
    are given as the raw strings which are accepted, an explicit
    converter for the accepted values can be set with *parse_as*.
    """
    def __init__(self, choices, parse_as=None):
        if not choices:
            raise ValueError('expected at least one choice, not: %r' % (choices,))
        self.choices = [str(c) for c in choices]
        base = get_validator(parse_as)
        for choice in self.choices:
            base.validate(choice)
        self.base = base
        super(ChoicesValidator, self).__init__(self._parse, type_tag=base.type_tag,
                                               target_type=base.target_type,
                                               label='one of ' + ', '.join(self.choices))

    def _parse(self, text):
        if text not in self.choices:
            raise ValueError('expected one of %s, not: %r' % (', '.join(self.choices), text))
        return self.base.validate(text)

    def __repr__(self):
        cn = self.__class__.__name__
        return "%s(%r, parse_as=%r)" % (cn, self.choices, self.base)


def _parse_string(text):
    if not isinstance(text, str):
        raise TypeError('expected string, not: %r' % (text,))
    if not text:
        raise ValueError('expected non-empty string')
    return text


def _parse_bool(text):
    lowered = text.lower()
    if lowered == 'true':
        return True
    elif lowered == 'false':
        return False
    raise ValueError('expected "true" or "false", not: %r' % text)


def _parse_char(text):
    if len(text) != 1:
        raise ValueError('expected a single character, not: %r' % text)
    return text


def _parse_path(text):
    return pathlib.Path(_parse_string(text))


_INT_RE = re.compile(r'^[-+]?[0-9]+\Z')
_UINT_RE = re.compile(r'^\+?[0-9]+\Z')


def _parse_int(text, signed=True):
    int_re = _INT_RE if signed else _UINT_RE
    if not int_re.match(text):
        raise ValueError('expected %sinteger, not: %r' % ('' if signed else 'unsigned ', text))
    return int(text)


def _make_int_parser(bits, signed=True):
    if signed:
        min_val, max_val = -(2 ** (bits - 1)), 2 ** (bits - 1) - 1
    else:
        min_val, max_val = 0, 2 ** bits - 1

    def _parse_sized_int(text):
        value = _parse_int(text, signed)
        if not min_val <= value <= max_val:
            raise ValueError('%s is out of range: %s..%s' % (value, min_val, max_val))
        return value
    _parse_sized_int.__name__ = '%s%s' % ('i' if signed else 'u', bits)
    return _parse_sized_int


_TYPE_MAP = OrderedDict()
_PYTHON_TYPE_TAGS = {str: 'string',
                     int: 'int',
                     float: 'float',
                     bool: 'bool',
                     pathlib.Path: 'path'}


def register_type(type_tag, func, target_type=None, label=None):
    """Register a validator under the name *type_tag*, making it
    usable as ``Argument(validator=type_tag)`` and representable in
    serialized Command trees.

    Raises ValueError if the tag is already taken.
    """
    if not type_tag or not isinstance(type_tag, str):
        raise ValueError('expected non-empty string type tag, not: %r' % (type_tag,))
    if type_tag in _TYPE_MAP:
        raise ValueError('type tag already registered: %r' % type_tag)
    validator = Validator(func, type_tag=type_tag, target_type=target_type, label=label)
    _TYPE_MAP[type_tag] = validator
    return validator


def get_registered_types():
    return list(_TYPE_MAP.keys())


register_type('string', _parse_string, str)
register_type('int', _parse_int, int)
for _bits in (8, 16, 32, 64, 128):
    register_type('i%s' % _bits, _make_int_parser(_bits), int)
    register_type('u%s' % _bits, _make_int_parser(_bits, signed=False), int)
register_type('isize', _make_int_parser(64), int)
register_type('usize', _make_int_parser(64, signed=False), int)
register_type('float', float, float)
register_type('f32', float, float)
register_type('f64', float, float)
register_type('bool', _parse_bool, bool)
register_type('char', _parse_char, str, label='character')
register_type('path', _parse_path, pathlib.Path)
register_type('ip_address', ipaddress.ip_address, label='IP address')

DEFAULT_VALIDATOR = _TYPE_MAP['string']


def get_validator(value_type):
    """Turn any of the supported validator types into a
    Validator instance:

    * None, for the default, which accepts any non-empty string
    * A Validator instance, returned as-is
    * A registered type tag, like ``'u64'`` or ``'path'``
    * One of the Python types str, int, float, bool, or pathlib.Path
    * Any other callable, which will not be serializable
    """
    if value_type is None:
        return DEFAULT_VALIDATOR
    if isinstance(value_type, Validator):
        return value_type
    if isinstance(value_type, str):
        try:
            return _TYPE_MAP[value_type]
        except KeyError:
            raise ValueError('unknown type tag %r, expected one of: %s'
                             % (value_type, ', '.join(_TYPE_MAP.keys())))
    if value_type in _PYTHON_TYPE_TAGS:
        return _TYPE_MAP[_PYTHON_TYPE_TAGS[value_type]]
    if callable(value_type):
        target_type = value_type if isinstance(value_type, type) else None
        return Validator(value_type, target_type=target_type)
    raise TypeError('expected validator, type tag, or callable, not: %r' % (value_type,))
