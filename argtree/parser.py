
import re
import logging
from boltons.iterutils import unique
from boltons.dictutils import OrderedMultiDict as OMD

from argtree.errors import (UnknownOption,
                            UnknownCommand,
                            DuplicateOption,
                            MissingOption,
                            NotEnoughArguments,
                            TooManyArguments,
                            InvalidArgument,
                            InvalidOptionExpression)
from argtree.result import ParseResult, MatchedOption, MatchedArgument
from argtree.suggest import get_suggestions
from argtree.utils import normalize_name, identifier_to_flag


log = logging.getLogger(__name__)

# tokens like -1, -2.5, and -1e3 are values unless an option claims them
_NUMBER_RE = re.compile(r'^-(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?\Z')
_INF = float('inf')


def parse_sv_line(line, sep=','):
    """Parse a single line of values, separated by the delimiter
    *sep*. Supports quoting.

    """
    from csv import reader, Dialect, QUOTE_MINIMAL

    class _argtree_dialect(Dialect):
        delimiter = sep
        escapechar = '\\'
        quotechar = '"'
        doublequote = True
        skipinitialspace = False
        lineterminator = '\n'
        quoting = QUOTE_MINIMAL

    parsed = list(reader([line], dialect=_argtree_dialect))
    return parsed[0]


def _get_max_total(slots):
    total = 0
    for slot in slots:
        if slot.max_count is None:
            return None
        total += slot.max_count
    return total


def _allocate_surplus(slots, counts, surplus, skip=()):
    # surplus goes to the last slot first, up to its max_count
    for i in reversed(range(len(slots))):
        if not surplus:
            break
        if i in skip:
            continue
        max_count = slots[i].max_count
        room = surplus if max_count is None else min(surplus, max_count - counts[i])
        counts[i] += room
        surplus -= room
    return surplus


def _get_fallback_tables(slots, count):
    # tables[i] maps (zeroed, min_total) for slots[i:] to the largest
    # possible max_total, with zeroed counting slots left to defaults
    tables = [None] * len(slots) + [{(0, 0): 0}]
    for i in reversed(range(len(slots))):
        slot, table = slots[i], {}
        for (zeroed, min_total), max_total in tables[i + 1].items():
            keep_min = min_total + slot.min_count
            if keep_min <= count:
                keep_max = _INF if slot.max_count is None else max_total + slot.max_count
                key = (zeroed, keep_min)
                table[key] = max(table.get(key, -1), keep_max)
            if slot.has_defaults:
                key = (zeroed + 1, min_total)
                table[key] = max(table.get(key, -1), max_total)
        tables[i] = table
    return tables


def _can_finish(table, zeroed, min_room, max_needed):
    for (t_zeroed, min_total), max_total in table.items():
        if t_zeroed == zeroed and min_total <= min_room and max_total >= max_needed:
            return True
    return False


def _get_fallback_counts(slots, count):
    """Find the counts for when there are too few values for every
    slot's min_count, leaving as few slots with defaults empty as
    possible. Among equally small choices, the rightmost slots are left
    empty. Returns None if no choice works.
    """
    tables = _get_fallback_tables(slots, count)
    fits = [z for (z, _), t_max in tables[0].items() if t_max >= count]
    if not fits:
        return None
    left = min(fits)
    zeroed = set()
    min_total = max_total = 0
    for i, slot in enumerate(slots):
        slot_max = _INF if slot.max_count is None else slot.max_count
        if _can_finish(tables[i + 1], left,
                       count - min_total - slot.min_count,
                       count - max_total - slot_max):
            min_total += slot.min_count
            max_total += slot_max
        else:
            zeroed.add(i)
            left -= 1
    counts = [0 if i in zeroed else slot.min_count for i, slot in enumerate(slots)]
    _allocate_surplus(slots, counts, count - sum(counts), skip=zeroed)
    return counts


def allocate_counts(slots, count, command=None, owner=None, tokens=()):
    """Distribute *count* consecutive values across the Argument
    *slots*, returning a list with the number of values for each slot.

    Every slot's min_count is satisfied first, in order. Any surplus
    goes to the last slot, up to its max_count, then the one before
    it, and so on. When there are too few values to satisfy every
    minimum, slots with defaults may receive no values at all (and be
    filled from their defaults later), but never fewer than their
    min_count otherwise.

    Raises NotEnoughArguments naming the first slot which could not be
    satisfied, or TooManyArguments when the values exceed the total
    capacity of the slots. *command*, *owner*, and *tokens* are only
    used to build those exceptions.

    >>> from argtree.schema import Argument
    >>> allocate_counts([Argument('a'), Argument('b', max_count=None)], 4)
    [1, 3]
    """
    mins = [slot.min_count for slot in slots]
    total_min = sum(mins)
    if count >= total_min:
        counts = list(mins)
        leftover = _allocate_surplus(slots, counts, count - total_min)
        if leftover:
            max_total = _get_max_total(slots)
            raise TooManyArguments.from_parse(command, owner, max_total, count,
                                              extra=list(tokens)[max_total:])
        return counts

    counts = _get_fallback_counts(slots, count)
    if counts is not None:
        return counts

    # too few values, even with every slot with defaults left empty
    remaining = count
    for slot in slots:
        if slot.has_defaults:
            continue
        if remaining < slot.min_count:
            raise NotEnoughArguments.from_parse(command, owner, slot, remaining)
        remaining -= slot.min_count

    # enough for the slots without defaults, but too many for those alone
    remaining = count
    for slot in slots:
        if remaining < slot.min_count:
            raise NotEnoughArguments.from_parse(command, owner, slot, remaining)
        remaining -= slot.min_count


class _Level(object):
    "Matching state for a single command of the matched path."
    def __init__(self, command):
        self.command = command
        self.occurrences = OMD()
        self.defaulted = []
        self.positional = []
        self.sep_index = None
        self.args = []
        self.trailing = []


class Parser(object):
    """The Parser matches a list of string tokens against a tree of
    :class:`~argtree.command.Command` objects, producing a
    :class:`~argtree.result.ParseResult` or raising a single
    :class:`~argtree.errors.ArgumentParseError`.

    Args:
       command (Command): The command where matching starts, usually
          the root of the tree. The tree is built if it hasn't been
          already.
       separator (str): The token which ends option matching. All
          tokens after it are positional values. Defaults to ``--``.
       prefixes (tuple): Prefixes which mark a token as an option.
          Either prefix may be used with an option's name or aliases.
          Defaults to ``('--', '-')``.
       assign_chars (str): Characters which separate an option from
          an inline value, as in ``--name=value``. Pass an empty string
          to disable inline values. Defaults to ``=``.
       list_sep (str): Separates multiple inline values for options
          taking more than one value, as in ``--nums=1,2,3``. Defaults
          to ``,``.

    Parsers hold no state between calls to :meth:`parse`, and never
    modify the command tree, so a single Parser can be reused.
    """
    def __init__(self, command, separator='--', prefixes=('--', '-'),
                 assign_chars='=', list_sep=','):
        if not separator or not isinstance(separator, str):
            raise ValueError('expected non-empty string separator, not: %r' % (separator,))
        if isinstance(prefixes, str):
            prefixes = (prefixes,)
        prefixes = list(prefixes or ())
        if not prefixes or not all([p and isinstance(p, str) for p in prefixes]):
            raise ValueError('expected one or more non-empty string prefixes, not: %r' % (prefixes,))
        if not isinstance(list_sep, str) or len(list_sep) != 1:
            raise ValueError('expected single-character list_sep, not: %r' % (list_sep,))
        self.command = command.build()
        self.separator = separator
        self.prefixes = sorted(unique(prefixes), key=len, reverse=True)
        self.assign_chars = assign_chars or ''
        self.list_sep = list_sep

    def parse(self, tokens):
        """This method takes a list of strings and matches them against
        the options, arguments, and subcommands of the command tree.

        Args:
           tokens (list): A required list of strings, not including
              the program name (i.e., ``sys.argv[1:]``).

        Returns the :class:`~argtree.result.ParseResult` of the
        executing command, the last subcommand matched.

        This method may raise ArgumentParseError (or one of its
        subtypes) if the list of strings fails to match.
        """
        if tokens is None or isinstance(tokens, str):
            raise TypeError('expected list of string tokens, not: %r' % (tokens,))
        tokens = list(tokens)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError('expected string tokens, not: %r' % (token,))

        levels = [_Level(self.command)]
        cur = levels[0]
        after_sep = False
        i, len_tokens = 0, len(tokens)
        while i < len_tokens:
            token = tokens[i]
            i += 1
            if after_sep:
                cur.positional.append(token)
                continue
            if token == self.separator:
                after_sep = True
                cur.sep_index = len(cur.positional)
                continue

            option, inline = self._match_option(cur.command, token)
            if option is not None:
                if option.stop:
                    log.debug('stopping parse at %r', token)
                    level = self._get_declaring_level(levels, option)
                    level.occurrences.add(option.name, [[] for _ in option.args])
                    return self._build_result(levels, tokens, stopped_by=option)
                if inline is not None:
                    values = self._split_inline(option, inline)
                else:
                    values = []
                    max_count = option.max_count
                    while i < len_tokens and (max_count is None or len(values) < max_count):
                        next_token = tokens[i]
                        if next_token == self.separator or self._is_option_token(cur.command, next_token):
                            break
                        if not cur.positional and cur.command.get_subcommand(next_token) is not None:
                            break
                        values.append(next_token)
                        i += 1
                self._match_option_args(levels, option, values)
                continue

            if not cur.positional:
                subcmd = cur.command.get_subcommand(token)
                if subcmd is not None:
                    log.debug('descending from %r into subcommand %r', cur.command.name, subcmd.name)
                    cur = _Level(subcmd)
                    levels.append(cur)
                    continue
                if cur.command.subcommands and not cur.command.args:
                    raise UnknownCommand.from_parse(cur.command, token,
                                                    self._suggest_subcommands(cur.command, token))
            cur.positional.append(token)

        self._match_positional(cur)
        self._check_required(levels)
        self._fill_defaults(levels)
        return self._build_result(levels, tokens)

    def _split_prefix(self, token):
        for prefix in self.prefixes:
            if token.startswith(prefix) and token != prefix:
                return prefix, token[len(prefix):]
        return None, None

    def _split_assign(self, body):
        for i, char in enumerate(body):
            if char in self.assign_chars:
                return body[:i], body[i + 1:]
        return body, None

    def _match_option(self, command, token):
        """Returns a tuple of (Option, inline value). Both are None when
        the token is not an option. Raises UnknownOption for
        option-like tokens which aren't in scope, and
        InvalidOptionExpression for malformed inline assignments."""
        prefix, body = self._split_prefix(token)
        if prefix is None:
            return None, None

        name, inline = self._split_assign(body)
        option = command.get_option(name)
        if option is None:
            if _NUMBER_RE.match(token):
                return None, None
            if inline is not None and not name:
                raise InvalidOptionExpression('expected option name before %r in: %r'
                                              % (token[len(prefix)], token),
                                              command=command, token=token)
            suggestions = self._suggest_options(command, normalize_name(name))
            raise UnknownOption.from_parse(command, token, suggestions)
        if inline is not None and not inline:
            raise InvalidOptionExpression('expected value after %r in: %r'
                                          % (token[-1], token),
                                          command=command, token=token)
        log.debug('matched option %s from token %r', identifier_to_flag(option.name), token)
        return option, inline

    def _is_option_token(self, command, token):
        prefix, body = self._split_prefix(token)
        if prefix is None:
            return False
        if _NUMBER_RE.match(token):
            return command.get_option(self._split_assign(body)[0]) is not None
        return True

    def _split_inline(self, option, inline):
        max_count = option.max_count
        if max_count is None or max_count > 1:
            return parse_sv_line(inline, self.list_sep)
        return [inline]

    def _suggest_options(self, command, name):
        candidates = [n for n, opt in command.get_scope_map().items() if not opt.hidden]
        return get_suggestions(name, candidates)

    def _suggest_subcommands(self, command, token):
        candidates = []
        for subcmd in command.subcommands:
            if not subcmd.hidden:
                candidates.extend(subcmd.names)
        return get_suggestions(token, candidates)

    def _get_declaring_level(self, levels, option):
        for level in reversed(levels):
            if option in level.command.options:
                return level
        return levels[0]  # global option of a parent of the starting command

    def _match_option_args(self, levels, option, values):
        command = levels[-1].command
        level = self._get_declaring_level(levels, option)
        if option.name in level.occurrences and not option.multi:
            raise DuplicateOption.from_parse(command, option)
        counts = allocate_counts(option.args, len(values), command=command,
                                 owner=option, tokens=values)
        allocated = []
        start = 0
        for arg, arg_count in zip(option.args, counts):
            arg_values = values[start:start + arg_count]
            self._validate(command, option, arg, arg_values)
            allocated.append(arg_values)
            start += arg_count
        log.debug('option %s got values %r, allocated as %r',
                  identifier_to_flag(option.name), values, counts)
        level.occurrences.add(option.name, allocated)

    def _validate(self, command, owner, arg, values):
        for value in values:
            try:
                arg.validator.validate(value)
            except Exception as e:
                raise InvalidArgument.from_parse(command, owner, arg, value, exc=e)

    def _match_positional(self, level):
        command = level.command
        positional = level.positional
        max_total = _get_max_total(command.args)
        if (command.trailing and level.sep_index is not None
                and max_total is not None and len(positional) > max_total):
            cut = max(max_total, level.sep_index)
            positional, level.trailing = positional[:cut], positional[cut:]

        counts = allocate_counts(command.args, len(positional), command=command,
                                 owner=command, tokens=positional)
        log.debug('allocated %s positional values to %r as %r',
                  len(positional), command.get_arg_names(), counts)
        start = 0
        for arg, arg_count in zip(command.args, counts):
            arg_values = positional[start:start + arg_count]
            self._validate(command, command, arg, arg_values)
            if arg_values:
                level.args.append(MatchedArgument(arg, arg_values))
            elif arg.has_defaults:
                level.args.append(MatchedArgument(arg, arg.defaults, from_default=True))
            start += arg_count

    def _get_level_options(self, levels, level):
        options = level.command.options
        if level is levels[0]:
            # globals of commands above where matching started
            options = level.command.get_options()
        return options

    def _check_required(self, levels):
        command = levels[-1].command
        for level in levels:
            for option in self._get_level_options(levels, level):
                if option.required and option.name not in level.occurrences:
                    raise MissingOption.from_parse(command, option)

    def _fill_defaults(self, levels):
        for level in levels:
            for option in self._get_level_options(levels, level):
                if option.has_defaults and option.name not in level.occurrences:
                    level.defaulted.append(option)

    def _build_result(self, levels, tokens, stopped_by=None):
        ret = None
        for level in levels:
            options = []
            for option in self._get_level_options(levels, level):
                if option.name in level.occurrences:
                    matched = self._get_matched_option(option, level.occurrences.getlist(option.name))
                elif option in level.defaulted:
                    margs = [(arg.name, MatchedArgument(arg, arg.defaults, from_default=True))
                             for arg in option.args]
                    matched = MatchedOption(option, margs, count=0, from_default=True)
                else:
                    continue
                options.append((option.name, matched))
            trailing = level.trailing if level is levels[-1] else None
            ret = ParseResult(level.command, parent=ret, options=options,
                              args=[(marg.name, marg) for marg in level.args],
                              trailing=trailing, argv=tokens, stopped_by=stopped_by)
        return ret

    def _get_matched_option(self, option, occurrences):
        margs = []
        for idx, arg in enumerate(option.args):
            values = []
            for allocated in occurrences:
                values.extend(allocated[idx])
            if not values and arg.has_defaults:
                margs.append((arg.name, MatchedArgument(arg, arg.defaults, from_default=True)))
            else:
                margs.append((arg.name, MatchedArgument(arg, values)))
        from_default = bool(margs) and all([marg.from_default for _, marg in margs])
        return MatchedOption(option, margs, count=len(occurrences), from_default=from_default)
