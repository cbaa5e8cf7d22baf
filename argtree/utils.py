
import re

from boltons.strutils import pluralize, singularize
from boltons.iterutils import unique


# keep it just to subset of valid ASCII identifiers for now
VALID_NAME_RE = re.compile(r"^[A-Za-z][-_A-Za-z0-9]*\Z")

VALID_CHARS = 'abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789!*+./?@_'


def normalize_name(name):
    """Canonicalize an option or subcommand name for lookup. Leading
    dashes are stripped, dashes become underscores, and anything
    longer than a single character is lower-cased.
    """
    ret = name.lstrip('-')
    if len(ret) > 1:
        # only single-character names are considered case-sensitive (like an initial)
        ret = ret.lower()
    ret = ret.replace('-', '_')
    return ret


def process_command_name(name):
    """Validate a Command's name or alias, generally on construction.
    Only letters, numbers, '-', and/or '_'. Must begin with a letter,
    and no trailing underscores or dashes.

    Returns the name unchanged; see ``normalize_name()`` for the form
    used for lookup.
    """
    if not name or not isinstance(name, str):
        raise ValueError('expected non-zero length string for subcommand name, not: %r' % name)

    if name.endswith('-') or name.endswith('_'):
        raise ValueError('expected subcommand name without trailing dashes'
                         ' or underscores, not: %r' % name)

    name_match = VALID_NAME_RE.match(name)
    if not name_match:
        raise ValueError('valid subcommand name must begin with a letter, and'
                         ' consist only of letters, digits, underscores, and'
                         ' dashes, not: %r' % name)
    return name


def option_to_identifier(name):
    """Validate and canonicalize an option name or alias to a valid
    Python identifier (variable name).

    Valid input strings include only letters, numbers, '-', and/or
    '_'. Only single/double leading dash allowed (-/--). No trailing
    dashes or underscores. Single-character aliases may also be
    shell-friendly punctuation, like ``-?``.

    Input case doesn't matter, output case will always be lower,
    except for single characters.
    """
    orig_name = name
    if not name or not isinstance(name, str):
        raise ValueError('expected non-zero length string for option, not: %r' % name)

    if name[:2] == '--':
        name = name[2:]
    elif name[:1] == '-':
        name = name[1:]

    if len(name) == 1:
        if name not in VALID_CHARS:
            raise ValueError('expected valid option character (ASCII letters, numbers,'
                             ' or shell-compatible punctuation), not: %r' % orig_name)
        return name

    if name.endswith('-') or name.endswith('_'):
        raise ValueError('expected option without trailing dashes'
                         ' or underscores, not: %r' % orig_name)

    name_match = VALID_NAME_RE.match(name)
    if not name_match:
        raise ValueError('valid option names must begin with a letter, optionally'
                         ' prefixed by dashes, and consist only of letters,'
                         ' digits, underscores, and dashes, not: %r' % orig_name)

    return normalize_name(name)


def identifier_to_flag(identifier):
    """
    Turn an identifier back into its flag format (e.g., "max_count" -> --max-count, "v" -> -v).
    """
    if identifier.startswith('-'):
        raise ValueError('expected identifier, not flag name: %r' % identifier)
    if len(identifier) == 1:
        return '-' + identifier
    ret = identifier.lower().replace('_', '-')
    return '--' + ret


def format_option_label(option):
    "The default option label formatter, used in help and error formatting"
    parts = [identifier_to_flag(option.name)]
    parts.extend([identifier_to_flag(a) for a in option.aliases])
    ret = ' / '.join(parts)
    for arg in option.args:
        ret += ' ' + get_cardinalized_args_label(arg.name.upper(), arg.min_count, arg.max_count)
    return ret


def format_args_label(args):
    "The default positional argument label formatter, used in help formatting"
    labels = [get_cardinalized_args_label(arg.name, arg.min_count, arg.max_count)
              for arg in args]
    return ' '.join([label for label in labels if label])


def get_cardinalized_args_label(name, min_count, max_count):
    '''
    Examples for parameter values: (min_count, max_count): output for name=arg:

      1, 1: arg
      0, 1: [arg]
      0, None: [args ...]
      1, 3: arg [args ...]
    '''
    if min_count == max_count:
        return ' '.join([name] * min_count)
    if min_count == 1:
        return name + ' ' + get_cardinalized_args_label(name,
                                                        min_count=0,
                                                        max_count=max_count - 1 if max_count is not None else None)

    tmpl = '[%s]' if min_count == 0 else '%s'
    if max_count == 1:
        return tmpl % name
    return tmpl % (pluralize(singularize(name)) + ' ...')


def get_count_text(min_count, max_count):
    """Describe an arity in words, as used in error messages. A
    *max_count* of None means there is no maximum.

    >>> get_count_text(1, None)
    '1 or more values'
    """
    if min_count == max_count:
        if min_count == 0:
            return 'no values'
        return '%s value%s' % (min_count, 's' if min_count > 1 else '')
    if max_count is None:
        if min_count == 0:
            return 'any number of values'
        return '%s or more values' % min_count
    if min_count == 0:
        return 'up to %s value%s' % (max_count, 's' if max_count > 1 else '')
    return '%s to %s values' % (min_count, max_count)


def unwrap_text(text):
    all_grafs = []
    cur_graf = []
    for line in text.splitlines():
        line = line.strip()
        if line:
            cur_graf.append(line)
        else:
            all_grafs.append(' '.join(cur_graf))
            cur_graf = []
    if cur_graf:
        all_grafs.append(' '.join(cur_graf))
    return '\n'.join(all_grafs)


def format_nonexp_repr(obj, req_names=None, opt_names=None, opt_key=None):
    """Format a non-expression-style repr

    Some object reprs look like object instantiation, e.g., App(r=[], mw=[]).

    This makes sense for smaller, lower-level objects whose state
    roundtrips. But a lot of objects contain values that don't
    roundtrip, like types and functions.

    For those objects, there is the non-expression style repr, which
    mimic's Python's default style to make a repr like this:

    <Option name='abc' required=True>
    """
    cn = obj.__class__.__name__
    req_names = req_names or []
    opt_names = opt_names or []
    all_names = unique(req_names + opt_names)

    if opt_key is None:
        opt_key = lambda v: v is None
    assert callable(opt_key)

    items = [(name, getattr(obj, name, None)) for name in all_names]
    labels = ['%s=%r' % (name, val) for name, val in items
              if not (name in opt_names and opt_key(val))]
    if not labels:
        labels = ['id=%s' % id(obj)]
    ret = '<%s %s>' % (cn, ' '.join(labels))
    return ret
