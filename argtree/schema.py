
from boltons.typeutils import make_sentinel

from argtree.errors import SchemaError
from argtree.values import get_validator
from argtree.utils import option_to_identifier, format_nonexp_repr


_UNSET = make_sentinel('_UNSET')


class Argument(object):
    """The Argument object describes a slot which consumes zero or more
    consecutive raw string values, either as a positional argument of
    a Command or as an argument of an Option.

    Args:
       name (str): A name for the argument, unique among the
          arguments of its Command or Option. Used to look up values in
          the ParseResult and as the placeholder in help output.
       doc (str): A summary description of the argument, used in
          automatic help generation.
       min_count (int): The minimum number of values. Defaults to 1.
       max_count (int): The maximum number of values. Pass None for no
          maximum. Defaults to *min_count*, or 1 if *min_count* is
          less than 1.
       count (int): Shorthand for setting *min_count* and *max_count*
          to the same number.
       validator: Checks and converts each value. Accepts a
          :class:`~argtree.values.Validator`, a registered type tag like
          ``'u64'``, a Python type, or any callable. Defaults to
          accepting any non-empty string.
       default: A string, or a list of strings, used as the values
          when the argument receives none at parse time. The number of
          defaults must satisfy *min_count* and *max_count*.
       error (str): A custom message used when a value fails the
          validator.

    Arguments are not modified by parsing, and are safe to share.
    """
    def __init__(self, name, doc=None, min_count=None, max_count=_UNSET,
                 count=None, validator=None, default=None, error=None):
        if not name or not isinstance(name, str) or len(name.split()) != 1:
            raise SchemaError('expected non-empty argument name without'
                              ' whitespace, not: %r' % (name,))
        self.name = name
        self.doc = doc
        self.error = error

        if count is not None:
            if min_count is not None or max_count is not _UNSET:
                raise SchemaError('expected count, or min_count and max_count, not both'
                                  ' (argument %r)' % name)
            min_count = max_count = count
        else:
            if min_count is None:
                min_count = 1 if max_count is _UNSET or max_count is None else min(1, max_count)
            if max_count is _UNSET:
                max_count = max(min_count, 1)
        self.min_count = int(min_count)
        self.max_count = int(max_count) if max_count is not None else None

        if self.min_count < 0:
            raise SchemaError('expected min_count >= 0, not: %r (argument %r)'
                              % (self.min_count, name), self)
        if self.max_count is not None:
            if self.max_count < 1:
                raise SchemaError('expected max_count >= 1, not: %r (argument %r)'
                                  % (self.max_count, name), self)
            if self.min_count > self.max_count:
                raise SchemaError('expected min_count <= max_count, not: %r > %r (argument %r)'
                                  % (self.min_count, self.max_count, name), self)

        try:
            self.validator = get_validator(validator)
        except (ValueError, TypeError) as e:
            raise SchemaError('invalid validator for argument %r: %s' % (name, e), self)

        self.defaults = self._process_defaults(default)

    def _process_defaults(self, default):
        if default is None:
            return ()
        if isinstance(default, (list, tuple)):
            defaults = tuple([str(d) for d in default])
        else:
            defaults = (str(default),)
        if not self.takes(len(defaults)):
            raise SchemaError('invalid default count for argument %r, expected'
                              ' %s..%s values, not %r'
                              % (self.name, self.min_count,
                                 self.max_count if self.max_count is not None else '',
                                 list(defaults)), self)
        for value in defaults:
            if not self.validator.is_valid(value):
                raise SchemaError('invalid default value for argument %r: %r'
                                  % (self.name, value), self)
        return defaults

    @property
    def is_unbounded(self):
        return self.max_count is None

    @property
    def has_defaults(self):
        return bool(self.defaults)

    def takes(self, count):
        "True if *count* values satisfy this argument's arity."
        if count < self.min_count:
            return False
        return self.max_count is None or count <= self.max_count

    def __repr__(self):
        return format_nonexp_repr(self, ['name', 'min_count', 'max_count'],
                                  ['validator', 'defaults'],
                                  opt_key=lambda v: not v)


def check_argument_list(args, owner=None):
    """Check an ordered sequence of Arguments for duplicate names and
    misplaced unbounded arguments. Only the last argument may take an
    unlimited number of values, otherwise splitting values between
    arguments would be ambiguous.

    Returns the arguments as a list. Raises SchemaError on problems.
    """
    ret = []
    seen_names = set()
    for i, arg in enumerate(args):
        if not isinstance(arg, Argument):
            raise SchemaError('expected Argument instance, not: %r' % (arg,), owner)
        if arg.name in seen_names:
            raise SchemaError('duplicate argument name: %r' % arg.name, owner)
        if arg.is_unbounded and i < len(args) - 1:
            raise SchemaError('argument %r takes an unbounded number of values,'
                              ' and must be the last argument, not followed by %r'
                              % (arg.name, [a.name for a in args[i + 1:]]), arg)
        seen_names.add(arg.name)
        ret.append(arg)
    return ret


def _ensure_args(args):
    if args is None:
        return []
    if isinstance(args, Argument):
        return [args]
    return list(args)


class Option(object):
    """The Option object represents a named switch which may be passed
    on the command line, optionally followed by values for its
    arguments.

    Args:
       name (str): A string name for the option, starting with a
          letter, and consisting of only ASCII letters, numbers, '-',
          and '_'. Leading dashes are allowed and ignored. The name is
          canonicalized, so ``'--max-count'`` becomes ``'max_count'``.
       args: An Argument, or a list of Arguments, for the values the
          option takes. Defaults to no arguments, making the option a
          simple flag.
       aliases: A string, or list of strings, with alternate names for
          the option, usually a single-character short form like ``'t'``.
       doc (str): A summary of the option's behavior, used in automatic
          help generation.
       multi (bool): Whether the option may be passed more than
          once. Values of repeated options are collected in order.
          Defaults to False, which makes repeats an error.
       required (bool): Whether the option must be passed. Defaults
          to False.
       is_global (bool): Pass True to make the option available to
          all subcommands of the Command it is added to.
       hidden (bool): Pass True to hide the option from help and
          suggestions. It is still parsed.
       stop (bool): Pass True to stop parsing as soon as the option is
          seen, skipping all remaining tokens and checks. Used for
          ``--help`` and ``--version``.
    """
    def __init__(self, name, args=None, aliases=None, doc=None, multi=False,
                 required=False, is_global=False, hidden=False, stop=False):
        try:
            self.name = option_to_identifier(name)
            if not aliases:
                aliases = []
            elif isinstance(aliases, str):
                aliases = [aliases]
            self.aliases = [option_to_identifier(a) for a in aliases]
        except ValueError as ve:
            raise SchemaError(str(ve), self)

        names = [self.name] + self.aliases
        if len(set(names)) != len(names):
            raise SchemaError('duplicate name or alias for option %r: %r'
                              % (self.name, self.aliases), self)

        self.doc = doc
        self.args = check_argument_list(_ensure_args(args), self)
        self.multi = bool(multi)
        self.required = bool(required)
        self.is_global = bool(is_global)
        self.hidden = bool(hidden)
        self.stop = bool(stop)

    @property
    def names(self):
        "The canonical name followed by all aliases."
        return [self.name] + self.aliases

    @property
    def takes_args(self):
        return bool(self.args)

    @property
    def max_count(self):
        "Total number of values this option can take, None if unbounded."
        total = 0
        for arg in self.args:
            if arg.max_count is None:
                return None
            total += arg.max_count
        return total

    @property
    def has_defaults(self):
        "True when every argument of this option has default values."
        return bool(self.args) and all([arg.has_defaults for arg in self.args])

    def get_arg(self, name):
        for arg in self.args:
            if arg.name == name:
                return arg
        return None

    def __repr__(self):
        return format_nonexp_repr(self, ['name'],
                                  ['aliases', 'args', 'multi', 'required',
                                   'is_global', 'hidden'],
                                  opt_key=lambda v: not v)
