
from collections import OrderedDict

from argtree.errors import ConversionError
from argtree.utils import format_nonexp_repr


class MatchedArgument(object):
    """The raw string values matched to a single Argument, either a
    Command's positional argument or one of an Option's arguments.

    ``from_default`` is True when no values were passed and the
    Argument's defaults were used instead.
    """
    def __init__(self, argument, values, from_default=False):
        self.argument = argument
        self.values = tuple(values)
        self.from_default = from_default

    @property
    def name(self):
        return self.argument.name

    def convert(self, as_type=None):
        if len(self.values) != 1:
            raise ConversionError('expected exactly one value for argument "%s", got %s: %r'
                                  % (self.name, len(self.values), list(self.values)))
        return self.argument.validator.convert(self.values[0], as_type)

    def convert_all(self, as_type=None):
        if not self.values:
            raise ConversionError('expected one or more values for argument "%s", got none'
                                  % self.name)
        return [self.argument.validator.convert(v, as_type) for v in self.values]

    def __repr__(self):
        return format_nonexp_repr(self, ['name', 'values'], ['from_default'],
                                  opt_key=lambda v: not v)


class MatchedOption(object):
    """An Option as it was matched at parse time.

    ``args`` maps each of the Option's argument names to a
    :class:`MatchedArgument`, with the values of all occurrences
    collected in order. ``count`` is the number of times the option
    was passed, 0 when it is present only through defaults.
    """
    def __init__(self, option, args=None, count=1, from_default=False):
        self.option = option
        self.args = OrderedDict(args or ())
        self.count = count
        self.from_default = from_default

    @property
    def name(self):
        return self.option.name

    @property
    def values(self):
        "All raw values of the option, across all of its arguments."
        ret = []
        for marg in self.args.values():
            ret.extend(marg.values)
        return tuple(ret)

    def get_arg(self, name):
        return self.args.get(name)

    def _get_pairs(self):
        return [(marg.argument, v) for marg in self.args.values() for v in marg.values]

    def __repr__(self):
        return format_nonexp_repr(self, ['name', 'values'], ['count', 'from_default'],
                                  opt_key=lambda v: not v)


class ParseResult(object):
    """The result of :meth:`Parser.parse`, one instance per matched
    Command, from the root down to the executing command. The parse
    returns the last, with each result linked to its predecessor
    through ``parent``.

    Args:
       command (Command): The matched Command.
       parent (ParseResult): The result for the parent command, None
          for the root.
       options (OrderedDict): Canonical option names mapped to
          :class:`MatchedOption`, for options declared on this command.
       args (OrderedDict): Positional argument names mapped to
          :class:`MatchedArgument`.
       trailing (list): Tokens after the separator which did not fit
          the command's positional arguments, if the command allows
          them.
       argv (tuple): All the tokens that were parsed.
       stopped_by (Option): The Option which ended parsing early,
          e.g., ``--help``, or None.

    Values are stored as raw strings. Typed values are produced on
    demand by :meth:`convert` and :meth:`convert_all`, using the
    validators of the matched arguments.

    Names passed to the accessors may refer to a positional argument
    of the command, or to any option in its scope by name or alias, in
    flag form or not (``'times'``, ``'--times'``, and ``'-t'`` all
    work). Positional argument names are checked first.
    """
    def __init__(self, command, parent=None, options=None, args=None,
                 trailing=None, argv=(), stopped_by=None):
        self.command = command
        self.parent = parent
        self.options = OrderedDict(options or ())
        self.args = OrderedDict(args or ())
        self.trailing = list(trailing or [])
        self.argv = tuple(argv)
        self.stopped_by = stopped_by

    @property
    def name(self):
        return self.command.name

    @property
    def path(self):
        "Names of the matched commands, from the root to this one."
        ret = []
        cur = self
        while cur is not None:
            ret.append(cur.command.name)
            cur = cur.parent
        return tuple(reversed(ret))

    @property
    def subcmds(self):
        return self.path[1:]

    def get_arg(self, name):
        "Get the MatchedArgument for positional argument *name*, or None."
        return self.args.get(name)

    def get_option(self, name):
        """Get the MatchedOption for the option named *name* (or one of
        its aliases), or None if the option was neither passed nor has
        defaults. Global options are looked up on the result of the
        command which declared them.
        """
        option = self.command.get_option(name)
        if option is None:
            return None
        cur = self
        while cur is not None:
            matched = cur.options.get(option.name)
            if matched is not None and matched.option is option:
                return matched
            cur = cur.parent
        return None

    def _lookup(self, name):
        if name in self.args:
            return self.args[name]
        if name in self.command.get_arg_names():
            return None
        if self.command.get_option(name) is None:
            raise KeyError('%s has no argument or option named %r'
                           % (self.command.name, name))
        return self.get_option(name)

    def contains(self, name):
        """True if *name* matched values or defaults, or, for options
        which take no arguments, was passed at all."""
        try:
            return self._lookup(name) is not None
        except KeyError:
            return False

    __contains__ = contains

    def get_raw(self, name):
        """Get the list of raw string values for *name*. Returns an
        empty list for known names without values. Raises KeyError for
        unknown names.
        """
        matched = self._lookup(name)
        if matched is None:
            return []
        return list(matched.values)

    def get_value(self, name, default=None):
        "Get the single raw value for *name*, or *default* if there isn't exactly one."
        values = self.get_raw(name)
        if len(values) != 1:
            return default
        return values[0]

    def is_default(self, name):
        matched = self._lookup(name)
        return matched is not None and matched.from_default

    def count(self, name):
        """For options, the number of times the option was passed.
        For positional arguments, the number of values received."""
        matched = self._lookup(name)
        if matched is None:
            return 0
        if isinstance(matched, MatchedOption):
            return matched.count
        return 0 if matched.from_default else len(matched.values)

    def _get_pairs(self, name):
        matched = self._lookup(name)
        if matched is None:
            return []
        if isinstance(matched, MatchedOption):
            return matched._get_pairs()
        return [(matched.argument, v) for v in matched.values]

    def convert(self, name, as_type=None):
        """Convert the single value of *name* to its typed value. If
        *as_type* is passed, the value is converted to that type, or
        checked to be compatible with it.

        Raises ConversionError if there is not exactly one value, or
        the value does not convert.
        """
        pairs = self._get_pairs(name)
        if len(pairs) != 1:
            raise ConversionError('expected exactly one value for "%s", got %s: %r'
                                  % (name, len(pairs), [v for _, v in pairs]))
        argument, raw = pairs[0]
        return argument.validator.convert(raw, as_type)

    def convert_all(self, name, as_type=None):
        """Convert all the values of *name* to a list of typed values.
        Raises ConversionError if there are no values, or any value
        does not convert."""
        pairs = self._get_pairs(name)
        if not pairs:
            raise ConversionError('expected one or more values for "%s", got none' % name)
        return [argument.validator.convert(raw, as_type) for argument, raw in pairs]

    def to_dict(self):
        """Get a plain dictionary of raw values, positional arguments
        by name and options by canonical name, including global options
        of parent commands. Options which take no arguments map to
        their count."""
        ret = OrderedDict()
        results = []
        cur = self
        while cur is not None:
            results.append(cur)
            cur = cur.parent
        for res in reversed(results):
            for opt_name, matched in res.options.items():
                if res is not self and not matched.option.is_global:
                    continue
                if matched.option.args:
                    ret[opt_name] = list(matched.values)
                else:
                    ret[opt_name] = matched.count
        for arg_name, matched in self.args.items():
            ret[arg_name] = list(matched.values)
        return ret

    def __repr__(self):
        return format_nonexp_repr(self, ['path'], ['options', 'args', 'trailing', 'stopped_by'],
                                  opt_key=lambda v: not v)
