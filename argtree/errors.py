
from argtree.utils import identifier_to_flag, get_count_text


class ArgtreeException(Exception):
    """The basest base exception argtree has. Rarely directly
    instantiated if ever, but useful for catching.
    """
    pass


class SchemaError(ArgtreeException):
    """Raised when a Command, Option, or Argument is configured in a
    way that could never parse consistently, e.g., conflicting names
    or an unbounded argument which is not the last argument.

    Always raised while the tree is being built, never during parsing.
    The offending Command, Option, or Argument is available as
    ``.node``.
    """
    def __init__(self, msg, node=None):
        super(SchemaError, self).__init__(msg)
        self.node = node


class ConversionError(ArgtreeException):
    """Raised by the typed accessors of a ParseResult (``convert()``
    and ``convert_all()``) when matched raw values can't be turned into
    the requested type. Never raised during parsing itself.
    """
    pass


class ArgumentParseError(ArgtreeException):
    """A base exception used for all errors raised during argument
    parsing.

    Many subtypes have a ".from_parse()" classmethod that creates an
    exception message from the values available during the parse
    process. The Command being matched when the error occurred is
    available as ``.command``.
    """
    def __init__(self, msg, command=None):
        super(ArgumentParseError, self).__init__(msg)
        self.command = command


class UnknownOption(ArgumentParseError):
    """
    Raised when an unrecognized option is passed.
    """
    def __init__(self, msg, command=None, token=None, suggestions=()):
        super(UnknownOption, self).__init__(msg, command)
        self.token = token
        self.suggestions = list(suggestions)

    @classmethod
    def from_parse(cls, command, token, suggestions=()):
        msg = 'unknown option "%s"' % token
        return cls(msg, command=command, token=token, suggestions=suggestions)


class UnknownCommand(ArgumentParseError):
    """
    Raised when an unrecognized subcommand is passed.
    """
    def __init__(self, msg, command=None, token=None, suggestions=()):
        super(UnknownCommand, self).__init__(msg, command)
        self.token = token
        self.suggestions = list(suggestions)

    @classmethod
    def from_parse(cls, command, token, suggestions=()):
        valid_names = [c.name for c in command.subcommands if not c.hidden]
        msg = ('unknown subcommand "%s", choose from: %s'
               % (token, ', '.join(valid_names)))
        return cls(msg, command=command, token=token, suggestions=suggestions)


class DuplicateOption(ArgumentParseError):
    """Raised when an option is passed multiple times, and the option's
    "multi" setting is off (the default).
    """
    def __init__(self, msg, command=None, option=None):
        super(DuplicateOption, self).__init__(msg, command)
        self.option = option

    @classmethod
    def from_parse(cls, command, option):
        msg = ('option "%s" was used multiple times, but can be used only once'
               % identifier_to_flag(option.name))
        return cls(msg, command=command, option=option)


class MissingOption(ArgumentParseError):
    """
    Raised when a required option is not passed. See Option for more info.
    """
    def __init__(self, msg, command=None, option=None):
        super(MissingOption, self).__init__(msg, command)
        self.option = option

    @classmethod
    def from_parse(cls, command, option):
        msg = 'missing required option: %s' % identifier_to_flag(option.name)
        return cls(msg, command=command, option=option)


class ArgumentArityError(ArgumentParseError):
    """Raised when too many or too few values are passed to a Command's
    positional arguments or to an Option's arguments.

    ``.owner`` is the Command or Option owning the arguments,
    ``.argument`` is the specific Argument at fault (if one could be
    singled out), and ``.actual`` is the number of values received.
    """
    def __init__(self, msg, command=None, owner=None, argument=None,
                 expected_min=0, expected_max=None, actual=0):
        super(ArgumentArityError, self).__init__(msg, command)
        self.owner = owner
        self.argument = argument
        self.expected_min = expected_min
        self.expected_max = expected_max
        self.actual = actual


def _get_owner_label(owner):
    # Options read better as flags, commands by name
    from argtree.schema import Option
    if isinstance(owner, Option):
        return 'option %s' % identifier_to_flag(owner.name)
    return 'command "%s"' % owner.name


class NotEnoughArguments(ArgumentArityError):
    @classmethod
    def from_parse(cls, command, owner, argument, actual):
        msg = ('too few values for argument "%s" of %s, expected %s, got %s'
               % (argument.name, _get_owner_label(owner),
                  get_count_text(argument.min_count, argument.max_count), actual))
        return cls(msg, command=command, owner=owner, argument=argument,
                   expected_min=argument.min_count,
                   expected_max=argument.max_count, actual=actual)


class TooManyArguments(ArgumentArityError):
    def __init__(self, msg, extra=(), **kw):
        super(TooManyArguments, self).__init__(msg, **kw)
        self.extra = list(extra)

    @classmethod
    def from_parse(cls, command, owner, expected_max, actual, extra=()):
        label = _get_owner_label(owner)
        if not expected_max:
            msg = '%s takes no values, got: %r' % (label, list(extra))
        else:
            msg = ('too many values for %s, expected %s, got %s (unexpected: %r)'
                   % (label, get_count_text(0, expected_max), actual, list(extra)))
        return cls(msg, command=command, owner=owner, expected_max=expected_max,
                   actual=actual, extra=extra)


class InvalidArgument(ArgumentParseError):
    """Raised when a value fails its Argument's validator. Carries the
    ``.argument``, the offending raw ``.value``, and a ``.reason``,
    which is the Argument's custom error message when one is set.
    """
    def __init__(self, msg, command=None, argument=None, value=None, reason=None):
        super(InvalidArgument, self).__init__(msg, command)
        self.argument = argument
        self.value = value
        self.reason = reason

    @classmethod
    def from_parse(cls, command, owner, argument, value, exc=None):
        if argument.error:
            reason = argument.error
        else:
            reason = 'expected a valid %s value' % argument.validator.label
            if exc is not None and str(exc):
                reason += ' (got error: %s)' % exc
        msg = ('invalid value %r for argument "%s" of %s: %s'
               % (value, argument.name, _get_owner_label(owner), reason))
        if argument.error is None and value.startswith('-'):
            msg += '. (Did you forget to pass an argument?)'
        return cls(msg, command=command, argument=argument, value=value, reason=reason)


class InvalidOptionExpression(ArgumentParseError):
    """Raised when an inline option assignment, like ``--name=value``,
    is malformed (e.g., ``--name=`` or ``=value``).
    """
    def __init__(self, msg, command=None, token=None):
        super(InvalidOptionExpression, self).__init__(msg, command)
        self.token = token
