
import os
import sys
import array
import textwrap

from argtree.schema import Option
from argtree.utils import (format_option_label,
                           format_args_label,
                           get_cardinalized_args_label)


def _get_termios_winsize():
    # TLPI, 62.9 (p. 1319)
    import fcntl
    import termios

    winsize = array.array('H', [0, 0, 0, 0])

    assert not fcntl.ioctl(sys.stdout, termios.TIOCGWINSZ, winsize)

    ws_row, ws_col, _, _ = winsize

    return ws_row, ws_col


def _get_environ_winsize():
    # ROWS/COLUMNS are special shell variables, not always exported
    try:
        rows, columns = int(os.environ.get('ROWS', 0)) or None, int(os.environ['COLUMNS'])
    except (KeyError, ValueError):
        rows, columns = None, None
    return rows, columns


def get_winsize():
    rows, cols = None, None
    try:
        rows, cols = _get_termios_winsize()
    except Exception:
        rows, cols = _get_environ_winsize()
    if not cols:
        rows, cols = _get_environ_winsize()
    return rows, cols


def _wrap_pair(indent, label, sep, doc, doc_start, max_doc_width):
    ret = []
    append = ret.append
    lhs = indent + label

    if not doc:
        append(lhs)
        return ret

    len_sep = len(sep)
    wrapped_doc = textwrap.wrap(doc, max_doc_width)
    if len(lhs) <= doc_start:
        lhs_f = lhs.ljust(doc_start - len(sep)) + sep
        append(lhs_f + wrapped_doc[0])
    else:
        append(lhs)
        append((' ' * (doc_start - len_sep)) + sep + wrapped_doc[0])

    for line in wrapped_doc[1:]:
        append(' ' * doc_start + line)

    return ret


def format_option_post_doc(option):
    "The default option post-doc formatter, used in help formatting"
    parts = []
    if option.required:
        parts.append('required')
    defaults = [' '.join(arg.defaults) for arg in option.args if arg.defaults]
    if defaults and len(defaults) == len(option.args):
        parts.append('defaults to %s' % ' '.join(defaults))
    if option.multi:
        parts.append('may be repeated')
    if not parts:
        return ''
    return '(%s)' % ', '.join(parts)


def format_arg_post_doc(arg):
    "The default positional argument post-doc formatter, used in help formatting"
    if arg.defaults:
        return '(defaults to %s)' % ' '.join(arg.defaults)
    return ''


def _join_doc(doc, post_doc):
    return ' '.join([p for p in (doc, post_doc) if p])


DEFAULT_HELP_OPTION = Option('--help', aliases='-h', doc='show this help message and exit',
                             is_global=True, stop=True)
DEFAULT_VERSION_OPTION = Option('--version', doc='show version and exit',
                                is_global=True, stop=True)


class HelpHandler(object):
    """The HelpHandler renders help text for Commands, and controls
    the ``--help`` and ``--version`` options added to root commands.

    Args:
       flag (Option): The Option which triggers help output. Defaults
          to ``--help`` / ``-h``. Pass None to disable.
       version_flag (Option): The Option which triggers version
          output, added only to root commands with a version. Defaults
          to ``--version``. Pass None to disable.
       func (callable): Called with the ParseResult when help is
          requested. Defaults to printing help text and exiting with
          status 0.

    All other keyword arguments override entries in
    ``HelpHandler.default_context``, which controls headings, widths,
    and spacing of the rendered text.
    """
    default_context = {
        'usage_label': 'Usage:',
        'subcmd_section_heading': 'Subcommands: ',
        'options_section_heading': 'Options: ',
        'args_section_heading': 'Arguments: ',
        'section_break': '\n',
        'group_break': '',
        'subcmd_example': 'subcommand',
        'options_example': '[OPTIONS]',
        'width': None,
        'max_width': 120,
        'min_doc_width': 50,
        'doc_separator': '   ',
        'section_indent': '  ',
        'pre_doc': '',
        'post_doc': '\n',
    }

    def __init__(self, flag=DEFAULT_HELP_OPTION, version_flag=DEFAULT_VERSION_OPTION,
                 func=None, **kwargs):
        ctx = {}
        for key, val in self.default_context.items():
            ctx[key] = kwargs.pop(key, val)
        if kwargs:
            raise TypeError('unexpected keyword arguments: %r' % list(kwargs.keys()))
        self.ctx = ctx
        for opt in (flag, version_flag):
            if opt is not None and not opt.stop:
                raise ValueError('expected help and version options with stop=True, not: %r' % opt)
        self.flag = flag
        self.version_flag = version_flag
        self.func = func if func is not None else self.default_help_func
        if not callable(self.func):
            raise TypeError('expected func to be callable, not %r' % func)

    def default_help_func(self, result):
        print(self.get_help_text(result.command))
        sys.exit(0)

    def version_func(self, result):
        cmd = result.command
        while cmd.version is None and cmd.parent is not None:
            cmd = cmd.parent
        print('%s %s' % (cmd.name, cmd.version or ''))
        sys.exit(0)

    def _get_layout(self, labels):
        ctx = self.ctx
        return get_layout(labels=labels,
                          indent=ctx['section_indent'],
                          sep=ctx['doc_separator'],
                          width=ctx['width'],
                          max_width=ctx['max_width'],
                          min_doc_width=ctx['min_doc_width'])

    def get_help_info(self, cmd):
        """Get a structured description of *cmd*, a dictionary with the
        usage line, the doc, and lists of (label, doc) pairs for
        arguments, options (including inherited global options), and
        subcommands. Hidden options and subcommands are left out.
        """
        args = [(get_cardinalized_args_label(arg.name, arg.min_count, arg.max_count),
                 _join_doc(arg.doc, format_arg_post_doc(arg)))
                for arg in cmd.args]
        options = [(format_option_label(opt),
                    _join_doc(opt.doc, format_option_post_doc(opt)))
                   for opt in cmd.get_options(with_hidden=False)]
        subcmds = [(', '.join(sc.names), sc.doc)
                   for sc in cmd.subcommands if not sc.hidden]
        return {'name': cmd.name,
                'path': cmd.get_path(),
                'usage': self.get_usage_line(cmd),
                'doc': cmd.doc,
                'version': cmd.version,
                'args': args,
                'options': options,
                'subcommands': subcmds}

    def get_help_text(self, cmd):
        ctx = self.ctx
        if cmd.help_text:
            return ctx['pre_doc'] + cmd.help_text + ctx['post_doc']

        info = self.get_help_info(cmd)

        ret = [info['usage']]
        append = ret.append
        append(ctx['group_break'])

        if info['doc']:
            append(info['doc'])
            append(ctx['section_break'])

        sections = [(ctx['subcmd_section_heading'], info['subcommands']),
                    (ctx['args_section_heading'], info['args']),
                    (ctx['options_section_heading'], info['options'])]
        for heading, pairs in sections:
            if not pairs:
                continue
            layout = self._get_layout(labels=[label for label, _ in pairs])
            append(heading)
            append(ctx['group_break'])
            for label, doc in pairs:
                ret.extend(_wrap_pair(indent=ctx['section_indent'],
                                      label=label,
                                      sep=ctx['doc_separator'],
                                      doc=doc,
                                      doc_start=layout['doc_start'],
                                      max_doc_width=layout['doc_width']))
            append(ctx['section_break'])

        if ret[-1] == ctx['section_break']:
            ret.pop()
        return ctx['pre_doc'] + '\n'.join(ret) + ctx['post_doc']

    def get_usage_line(self, cmd):
        ctx = self.ctx
        parts = [ctx['usage_label']] if ctx['usage_label'] else []
        if cmd.usage:
            return ' '.join(parts + [cmd.usage])

        append = parts.append

        append(' '.join(cmd.get_path()))

        if cmd.get_options(with_hidden=False):
            append(ctx['options_example'])

        if [sc for sc in cmd.subcommands if not sc.hidden]:
            append(ctx['subcmd_example'])

        args_label = format_args_label(cmd.args)
        if args_label:
            append(args_label)

        if cmd.trailing:
            append('[-- ...]')

        return ' '.join(parts)


def get_layout(labels, indent, sep, width=None, max_width=120, min_doc_width=40):
    if width is None:
        _, width = get_winsize()
        if width is None:
            width = 80
        width = min(width, max_width)
        width -= 2

    len_sep = len(sep)
    len_indent = len(indent)

    max_label_width = 0
    max_doc_width = min_doc_width
    doc_start = width - min_doc_width
    for label in labels:
        cur_len = len(label)
        if cur_len < max_label_width:
            continue
        max_label_width = cur_len
        if (len_indent + cur_len + len_sep + min_doc_width) < width:
            max_doc_width = width - max_label_width - len_sep - len_indent
            doc_start = len_indent + cur_len + len_sep

    return {'width': width,
            'label_width': max_label_width,
            'doc_width': max_doc_width,
            'doc_start': doc_start}
