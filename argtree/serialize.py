"""Conversion of Command trees to and from plain, JSON-compatible
documents, for storing a CLI's structure in a configuration file.

Only the structure is stored. Handler functions are not, and
validators are stored by their registered type tag (plus the choices of
a :class:`~argtree.values.ChoicesValidator`). Validators without a type
tag are written without one, and load as plain string arguments.

A command document looks like::

  {"name": "app",
   "description": "Does the thing.",
   "options": [{"name": "times", "aliases": ["t"],
                "args": [{"name": "times", "type": "u64", "default": ["1"]}]}],
   "args": [{"name": "values", "min_count": 1, "max_count": null}]}
"""

import json
import logging

from argtree.errors import SchemaError
from argtree.schema import Argument, Option
from argtree.command import Command
from argtree.values import ChoicesValidator


log = logging.getLogger(__name__)

COMMAND_KEYS = ('name', 'aliases', 'description', 'version', 'usage', 'help',
                'hidden', 'trailing', 'args', 'options', 'subcommands')
OPTION_KEYS = ('name', 'aliases', 'description', 'args', 'required',
               'multiple', 'global', 'hidden')
ARGUMENT_KEYS = ('name', 'description', 'min_count', 'max_count', 'type',
                 'default', 'error', 'choices')


def argument_to_dict(arg):
    validator = arg.validator
    choices = None
    if isinstance(validator, ChoicesValidator):
        choices = list(validator.choices)
    if validator.type_tag is None:
        log.debug('argument %r has a validator without a type tag, stored as a string', arg.name)
    return {'name': arg.name,
            'description': arg.doc,
            'min_count': arg.min_count,
            'max_count': arg.max_count,
            'type': validator.type_tag,
            'default': list(arg.defaults),
            'error': arg.error,
            'choices': choices}


def option_to_dict(option):
    return {'name': option.name,
            'aliases': list(option.aliases),
            'description': option.doc,
            'args': [argument_to_dict(arg) for arg in option.args],
            'required': option.required,
            'multiple': option.multi,
            'global': option.is_global,
            'hidden': option.hidden}


def command_to_dict(cmd):
    """Get a JSON-compatible dictionary describing *cmd* and all of its
    subcommands. The ``--help`` and ``--version`` options added by the
    command's HelpHandler are left out, as they are added again when
    the loaded tree is built.
    """
    builtins = []
    if cmd.help_handler:
        builtins = [cmd.help_handler.flag, cmd.help_handler.version_flag]
    return {'name': cmd.name,
            'aliases': list(cmd.aliases),
            'description': cmd.doc or None,
            'version': cmd.version,
            'usage': cmd.usage,
            'help': cmd.help_text,
            'hidden': cmd.hidden,
            'trailing': cmd.trailing,
            'args': [argument_to_dict(arg) for arg in cmd.args],
            'options': [option_to_dict(opt) for opt in cmd.options
                        if opt not in builtins],
            'subcommands': [command_to_dict(sc) for sc in cmd.subcommands]}


def _check_keys(doc, valid_keys, kind):
    if not isinstance(doc, dict):
        raise SchemaError('expected %s document to be a dict, not: %r' % (kind, doc))
    unknown = [k for k in doc if k not in valid_keys]
    if unknown:
        raise SchemaError('unexpected keys in %s document %r: %r'
                          % (kind, doc.get('name'), sorted(unknown)))
    if 'name' not in doc:
        raise SchemaError('expected name in %s document: %r' % (kind, doc))


def argument_from_dict(doc):
    _check_keys(doc, ARGUMENT_KEYS, 'argument')
    validator = doc.get('type')
    if doc.get('choices'):
        try:
            validator = ChoicesValidator(doc['choices'], parse_as=validator)
        except (ValueError, TypeError) as e:
            raise SchemaError('invalid choices for argument %r: %s' % (doc['name'], e))
    counts = dict([(k, doc[k]) for k in ('min_count', 'max_count') if k in doc])
    return Argument(doc['name'],
                    doc=doc.get('description'),
                    validator=validator,
                    default=doc.get('default') or None,
                    error=doc.get('error'),
                    **counts)


def option_from_dict(doc):
    _check_keys(doc, OPTION_KEYS, 'option')
    return Option(doc['name'],
                  args=[argument_from_dict(a) for a in doc.get('args') or []],
                  aliases=doc.get('aliases'),
                  doc=doc.get('description'),
                  multi=doc.get('multiple', False),
                  required=doc.get('required', False),
                  is_global=doc.get('global', False),
                  hidden=doc.get('hidden', False))


def command_from_dict(doc):
    """Create a Command tree from a document like those produced by
    :func:`command_to_dict`. The commands have no handler functions,
    so running them shows help. Raises SchemaError on unknown keys and
    invalid configuration.
    """
    _check_keys(doc, COMMAND_KEYS, 'command')
    return Command(None, doc['name'],
                   doc=doc.get('description') or '',
                   aliases=doc.get('aliases'),
                   version=doc.get('version'),
                   usage=doc.get('usage'),
                   help_text=doc.get('help'),
                   hidden=doc.get('hidden', False),
                   trailing=doc.get('trailing', False),
                   args=[argument_from_dict(a) for a in doc.get('args') or []],
                   options=[option_from_dict(o) for o in doc.get('options') or []],
                   subcommands=[command_from_dict(s) for s in doc.get('subcommands') or []])


def dumps(cmd, **kwargs):
    "Serialize *cmd* to a JSON string. Keyword arguments go to json.dumps()."
    kwargs.setdefault('indent', 2)
    return json.dumps(command_to_dict(cmd), **kwargs)


def loads(text):
    try:
        doc = json.loads(text)
    except ValueError as ve:
        raise SchemaError('invalid JSON command document: %s' % ve)
    return command_from_dict(doc)


def dump(cmd, fileobj, **kwargs):
    fileobj.write(dumps(cmd, **kwargs))


def load(fileobj):
    return loads(fileobj.read())
