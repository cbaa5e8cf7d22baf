
import sys
import logging
from functools import partial
from collections import OrderedDict

from boltons.strutils import camel2under
from boltons.iterutils import unique

from argtree.errors import (ArgtreeException,
                            ArgumentParseError,
                            SchemaError,
                            UnknownOption)
from argtree.schema import Argument, Option, check_argument_list
from argtree.utils import (unwrap_text,
                           normalize_name,
                           identifier_to_flag,
                           process_command_name,
                           format_nonexp_repr)
from argtree.help import HelpHandler
from argtree.suggest import format_suggestions


log = logging.getLogger(__name__)


class CommandLineError(ArgtreeException, SystemExit):
    def __init__(self, msg, code=1):
        SystemExit.__init__(self, msg)
        self.code = code


def _get_default_name(func):
    if func is None:
        raise SchemaError('expected name for Command without a handler function')
    if isinstance(func, partial):
        func = func.func  # just one level of partial for now
    try:
        return func.__name__  # most functions hit this
    except AttributeError:
        pass
    return camel2under(func.__class__.__name__).lower()  # callable instances, etc.


def _docstring_to_doc(func):
    doc = func.__doc__
    if not doc:
        return ''

    unwrapped = unwrap_text(doc)
    try:
        ret = [g for g in unwrapped.splitlines() if g][0]
    except IndexError:
        ret = ''

    return ret


def _subcmd_key(name):
    return name.lower().replace('-', '_')


def _check_text(text, kw_name, cmd):
    if text is None:
        return None
    if not isinstance(text, str) or not text.strip():
        raise SchemaError('expected non-blank string for %s, not: %r' % (kw_name, text), cmd)
    return text


def default_print_error(msg):
    return sys.stderr.write(msg + '\n')


DEFAULT_HELP_HANDLER = HelpHandler()


class Command(object):
    def __init__(self, func, name=None, doc=None, **kwargs):
        """The central type in argtree. Instantiate a Command, populate
        it with options, arguments, and subcommands, and then call
        command.run() to execute your CLI, or command.parse() to get a
        :class:`~argtree.result.ParseResult`.

        Note that only the first three constructor arguments are
        positional, the rest are keyword-only.

        Args:
           func (callable): The function called with the ParseResult
              when this command is the one being executed. Pass None
              for commands which only group subcommands, running them
              shows help.
           name (str): The name of this command, used when this
              command is included as a subcommand. (Defaults to name
              of function)
           doc (str): A description or message that appears in various
              help outputs. (Defaults to the first paragraph of the
              function's docstring)
           aliases (list): Alternate names for this command, when used
              as a subcommand.
           version (str): A version string, shown by ``--version``.
           args (list): Argument instances for the command's
              positional arguments, in order.
           options (list): Option instances to initialize the Command
              with.
           subcommands (list): Command instances to add as subcommands.
           hidden (bool): Pass True to hide this command from its
              parent's help and suggestions.
           trailing (bool): Pass True to collect tokens after the
              ``--`` separator which don't fit the positional arguments
              in ``ParseResult.trailing``, instead of raising an error.
           usage (str): Text to show after the usage label in place of
              the generated usage line.
           help_text (str): Text to show in place of the generated
              help text.
           help: Pass False to disable the automatically added
              ``--help`` (and ``--version``) options. Also accepts a
              HelpHandler instance, see those docs for more details.

        Options, arguments, and subcommands can always be added later
        with the .add() method, until the command is built.
        """
        name = name if name is not None else _get_default_name(func)
        try:
            self.name = process_command_name(name)
        except ValueError as ve:
            raise SchemaError(str(ve), self)

        if doc is None:
            doc = _docstring_to_doc(func) if func is not None else ''
        self.doc = doc
        self.func = func

        if func is not None and not callable(func):
            raise SchemaError('expected callable or None for Command func, not: %r' % func, self)

        aliases = kwargs.pop('aliases', None) or []
        if isinstance(aliases, str):
            aliases = [aliases]
        try:
            self.aliases = [process_command_name(a) for a in aliases]
        except ValueError as ve:
            raise SchemaError(str(ve), self)

        self.version = kwargs.pop('version', None)
        self.hidden = bool(kwargs.pop('hidden', False))
        self.trailing = bool(kwargs.pop('trailing', False))
        self.usage = _check_text(kwargs.pop('usage', None), 'usage', self)
        self.help_text = _check_text(kwargs.pop('help_text', None), 'help_text', self)

        help = kwargs.pop('help', DEFAULT_HELP_HANDLER)
        if help is True:
            help = DEFAULT_HELP_HANDLER
        if help and not isinstance(help, HelpHandler):
            raise SchemaError('expected HelpHandler instance or False for help, not: %r' % help, self)
        self.help_handler = help

        if not func and not help:
            raise SchemaError('Command requires a help handler or handler function'
                              ' to be set, not: %r' % func, self)

        self.parent = None
        self.args = []
        self._option_map = OrderedDict()
        self._subcmd_map = OrderedDict()
        self._scope_map = None
        self._built = False

        args = kwargs.pop('args', None) or []
        if isinstance(args, Argument):
            args = [args]
        options = kwargs.pop('options', None) or []
        subcommands = kwargs.pop('subcommands', None) or []

        if kwargs:
            raise TypeError('unexpected keyword arguments: %r' % sorted(kwargs.keys()))

        for arg in args:
            self.add_argument(arg)
        for option in options:
            self.add_option(option)
        for subcmd in subcommands:
            self.add_command(subcmd)

        return

    @property
    def names(self):
        return [self.name] + self.aliases

    @property
    def options(self):
        "Options declared on this command, not including inherited global options."
        return unique(self._option_map.values())

    @property
    def subcommands(self):
        return unique(self._subcmd_map.values())

    @property
    def is_built(self):
        return self._built

    @property
    def root(self):
        cur = self
        while cur.parent is not None:
            cur = cur.parent
        return cur

    def get_path(self):
        "Names of the commands from the root to this one."
        ret = []
        cur = self
        while cur is not None:
            ret.append(cur.name)
            cur = cur.parent
        return tuple(reversed(ret))

    def _check_mutable(self):
        if self._built:
            raise SchemaError('cannot modify Command %r after it has been built' % self.name, self)

    def add(self, *a, **kw):
        """Add an option, argument, or subcommand to this Command.

        If the first argument is a callable, this method contructs a
        Command from it and the remaining arguments, all of which are
        optional. See the Command docs for for full details on names
        and defaults.

        If the first argument is a string, this method constructs an
        Option from that name and the rest of the method arguments,
        all of which are optional. See the Option docs for more.

        If the argument is already an instance of Option, Argument,
        or Command, it is added as-is. A SchemaError is raised on
        conflicting names and other configuration problems.

        Returns the added item.
        """
        target = a[0]

        if isinstance(target, Argument):
            return self.add_argument(target)

        if isinstance(target, Option):
            return self.add_option(target)

        subcmd = target
        if not isinstance(subcmd, Command) and callable(subcmd):
            subcmd = Command(*a, **kw)  # attempt to construct a new subcmd

        if isinstance(subcmd, Command):
            self.add_command(subcmd)
            return subcmd

        option = Option(*a, **kw)  # attempt to construct an Option from arguments
        return self.add_option(option)

    def add_argument(self, arg):
        "Add an Argument to the end of this command's positional arguments."
        self._check_mutable()
        if not isinstance(arg, Argument):
            raise SchemaError('expected Argument instance, not: %r' % (arg,), self)
        if arg.name in self.get_arg_names():
            raise SchemaError('duplicate argument name for command %r: %r'
                              % (self.name, arg.name), arg)
        self.args.append(arg)
        return arg

    def add_option(self, option):
        """Add an Option to this command. Conflicts with the names and
        aliases of other options of this command are detected
        immediately, conflicts with global options of parent commands
        are detected when the tree is built.
        """
        self._check_mutable()
        if not isinstance(option, Option):
            raise SchemaError('expected Option instance, not: %r' % (option,), self)
        for name in option.names:
            if name in self._option_map:
                raise SchemaError('duplicate definition for option name %r on command %r'
                                  % (identifier_to_flag(name), self.name), option)
        for name in option.names:
            self._option_map[name] = option
        return option

    def add_command(self, subcmd):
        """Add a Command, and all of its subcommands, as a subcommand of
        this Command. A Command can only have one parent, and a
        SchemaError is raised if *subcmd* has already been added
        elsewhere, or if its name conflicts with an existing
        subcommand.
        """
        self._check_mutable()
        if not isinstance(subcmd, Command):
            raise SchemaError('expected Command instance, not: %r' % (subcmd,), self)
        if subcmd.parent is not None:
            raise SchemaError('command %r already has parent command %r'
                              % (subcmd.name, subcmd.parent.name), subcmd)
        if subcmd.is_built:
            raise SchemaError('cannot add built command %r as a subcommand' % subcmd.name, subcmd)
        cur = self
        while cur is not None:
            if cur is subcmd:
                raise SchemaError('cannot add command %r as a subcommand of itself'
                                  % subcmd.name, subcmd)
            cur = cur.parent
        keys = [_subcmd_key(n) for n in subcmd.names]
        if len(set(keys)) != len(keys):
            raise SchemaError('duplicate name or alias for command %r: %r'
                              % (subcmd.name, subcmd.aliases), subcmd)
        for key in keys:
            if key in self._subcmd_map:
                raise SchemaError('conflicting subcommand name: %r (already used by %r)'
                                  % (key, self._subcmd_map[key].name), subcmd)
        for key in keys:
            self._subcmd_map[key] = subcmd
        subcmd.parent = self
        return subcmd

    def get_arg_names(self):
        return [arg.name for arg in self.args]

    def get_arg(self, name):
        for arg in self.args:
            if arg.name == name:
                return arg
        return None

    def get_subcommand(self, token):
        "Get the child Command named *token* (or with the alias), or None."
        return self._subcmd_map.get(_subcmd_key(token))

    def _get_inherited_map(self):
        ret = OrderedDict()
        ancestors = []
        cur = self.parent
        while cur is not None:
            ancestors.append(cur)
            cur = cur.parent
        for ancestor in reversed(ancestors):
            for name, option in ancestor._option_map.items():
                if option.is_global:
                    ret[name] = option
        return ret

    def get_scope_map(self):
        """Get a map of every option name and alias usable with this
        command to its Option, including the global options of parent
        commands. Local options take precedence in the (invalid) case
        of conflicts, which are rejected when the tree is built.
        """
        if self._scope_map is not None:
            return self._scope_map
        ret = self._get_inherited_map()
        ret.update(self._option_map)
        return ret

    def get_option(self, name):
        """Look up an Option in this command's scope by name or alias,
        with or without leading dashes. Returns None if no option
        matches."""
        if not name:
            return None
        return self.get_scope_map().get(normalize_name(name))

    def get_options(self, with_hidden=True, inherited=True):
        """Get a list of options usable with this command, local options
        first, followed by any global options of parent commands."""
        options = list(self.options)
        if inherited:
            options.extend(self._get_inherited_map().values())
        options = unique(options)
        if not with_hidden:
            options = [o for o in options if not o.hidden]
        return options

    def build(self):
        """Validate this command's whole tree, starting from the root,
        and freeze it, after which no more options, arguments, or
        subcommands can be added anywhere in the tree. Raises
        SchemaError on invalid configuration.

        If the root command has a help handler, the handler's
        ``--help`` (and, if there is a version, ``--version``) options
        are added as global options first.

        This method is called automatically by parse() and run().
        Building an already-built command does nothing. Returns this
        command, not the root.
        """
        root = self.root
        if root._built:
            return self
        if root.help_handler:
            root._add_builtin_options()
        root._build()
        return self

    def _add_builtin_options(self):
        builtins = [self.help_handler.flag]
        if self.version is not None:
            builtins.append(self.help_handler.version_flag)
        for option in builtins:
            if option is None or option in self._option_map.values():
                continue
            if [n for n in option.names if n in self._option_map]:
                log.debug('not adding %s to %s, name already in use',
                          identifier_to_flag(option.name), self.name)
                continue
            self.add_option(option)

    def _build(self):
        if self._built:
            return
        check_argument_list(self.args, self)
        inherited = self._get_inherited_map()
        for name, option in self._option_map.items():
            if name in inherited and inherited[name] is not option:
                raise SchemaError('option %s of command %r conflicts with a global option'
                                  ' of a parent command: %r'
                                  % (identifier_to_flag(name), self.name, inherited[name]),
                                  option)
        for subcmd in self.subcommands:
            subcmd._build()
        self._scope_map = self.get_scope_map()
        self._built = True
        log.debug('built command %r with %s options and %s subcommands',
                  self.name, len(self.options), len(self.subcommands))

    def parse(self, tokens, **kwargs):
        """Parse a list of string *tokens* against this command tree,
        returning a :class:`~argtree.result.ParseResult` for the
        executing command. Keyword arguments are passed through to the
        :class:`~argtree.parser.Parser`.

        The tokens should not include the program name. Raises an
        ArgumentParseError subtype on invalid input.
        """
        from argtree.parser import Parser
        return Parser(self, **kwargs).parse(tokens)

    def run(self, argv=None, print_error=None):
        """Parses arguments and dispatches to the appropriate subcommand
        handler. If there is a parse error due to invalid user input,
        an error is printed and a CommandLineError is raised. If not
        caught, a CommandLineError will exit the process, typically
        with status code 1. Also handles dispatching to the
        appropriate HelpHandler, if configured.

        Defaults to handling the arguments on the command line
        (``sys.argv[1:]``), but can also be explicitly passed arguments
        via the *argv* parameter.

        Args:
           argv (list): A sequence of strings representing the
              command-line arguments, not including the program name.
              Defaults to ``sys.argv[1:]``.
           print_error (callable): The function that formats/prints
               error messages before program exit on CLI errors.

        Returns the return value of the handler function.
        """
        if print_error is None or print_error is True:
            print_error = default_print_error
        elif print_error and not callable(print_error):
            raise TypeError('expected callable for print_error, not %r'
                            % print_error)

        if argv is None:
            argv = sys.argv[1:]

        self.build()
        try:
            prs_res = self.parse(argv)
        except ArgumentParseError as ape:
            cmd = ape.command if ape.command is not None else self
            msg = 'error: ' + ' '.join(cmd.get_path())
            try:
                e_msg = ape.args[0]
            except (AttributeError, IndexError):
                e_msg = ''
            if e_msg:
                msg += ': ' + e_msg
            suggestions = getattr(ape, 'suggestions', None)
            if suggestions:
                formatter = identifier_to_flag if isinstance(ape, UnknownOption) else None
                msg += '\n' + format_suggestions(suggestions, formatter)
            cle = CommandLineError(msg)
            if print_error:
                print_error(msg)
            raise cle

        help_handler = self.help_handler
        stopped_by = prs_res.stopped_by
        if help_handler and stopped_by is not None:
            if stopped_by is help_handler.flag:
                return help_handler.func(prs_res)
            if stopped_by is help_handler.version_flag:
                return help_handler.version_func(prs_res)

        func = prs_res.command.func
        if not func:
            if help_handler:
                return help_handler.func(prs_res)
            return None

        return func(prs_res)

    def __repr__(self):
        return format_nonexp_repr(self, ['name', 'func'],
                                  ['aliases', 'args', 'version', 'hidden', 'trailing'],
                                  opt_key=lambda v: not v)
