
import io
import json

import pytest

from argtree import Command, Option, Argument, ChoicesValidator, SchemaError
from argtree.serialize import (dumps,
                               loads,
                               dump,
                               load,
                               command_to_dict,
                               command_from_dict)


def get_app_command():
    cmd = Command(None, 'app', doc='Repeat some values.', version='0.1')
    cmd.add(Option('times', Argument('times', validator='u64', default='1'), aliases='t',
                   doc='number of times to repeat'))
    cmd.add(Option('color', Argument('name', validator=ChoicesValidator(['red', 'blue']))))
    cmd.add(Option('verbose', aliases='v', is_global=True, multi=True))
    cmd.add(Argument('values', max_count=None))

    sub = Command(None, 'sub', aliases=['s'], hidden=True, trailing=True,
                  usage='app sub A B', help_text='Takes a pair.')
    sub.add(Argument('pair', count=2, error='expected two values'))
    cmd.add(sub)
    return cmd


def test_command_to_dict():
    cmd = get_app_command()
    cmd.build()
    doc = command_to_dict(cmd)

    assert doc['name'] == 'app'
    assert doc['description'] == 'Repeat some values.'
    assert doc['version'] == '0.1'
    assert [o['name'] for o in doc['options']] == ['times', 'color', 'verbose']

    times = doc['options'][0]
    assert times['aliases'] == ['t']
    assert times['args'] == [{'name': 'times',
                              'description': None,
                              'min_count': 1,
                              'max_count': 1,
                              'type': 'u64',
                              'default': ['1'],
                              'error': None,
                              'choices': None}]

    color_arg = doc['options'][1]['args'][0]
    assert color_arg['type'] == 'string'
    assert color_arg['choices'] == ['red', 'blue']

    assert doc['options'][2]['global'] is True
    assert doc['options'][2]['multiple'] is True
    assert doc['args'][0]['max_count'] is None

    sub = doc['subcommands'][0]
    assert sub['aliases'] == ['s']
    assert sub['hidden'] is True
    assert sub['trailing'] is True
    assert sub['usage'] == 'app sub A B'
    assert sub['help'] == 'Takes a pair.'
    assert doc['usage'] is None
    assert sub['args'][0]['error'] == 'expected two values'

    # it's all JSON
    assert json.loads(json.dumps(doc)) == doc


def test_round_trip():
    cmd = get_app_command()
    text = dumps(cmd)
    loaded = loads(text)

    assert command_to_dict(loaded) == command_to_dict(cmd)
    assert dumps(loaded) == text

    # the loaded tree parses the same way
    res = loaded.parse(['-t', '3', 'a', 'b'])
    assert res.convert('times') == 3
    assert res.get_raw('values') == ['a', 'b']
    assert loaded.parse(['a']).is_default('times')

    res = loaded.parse(['s', '-v', 'x', 'y'])
    assert res.path == ('app', 'sub')
    assert res.contains('verbose')
    assert res.command.usage == 'app sub A B'
    assert res.command.help_text == 'Takes a pair.'


def test_file_round_trip():
    cmd = get_app_command()
    buf = io.StringIO()
    dump(cmd, buf, indent=None)
    assert '\n' not in buf.getvalue()

    buf.seek(0)
    loaded = load(buf)
    assert loaded.name == 'app'
    assert loaded.get_subcommand('s').name == 'sub'


def test_unrepresentable_validator():
    cmd = Command(None, 'app')
    cmd.add(Argument('upper', validator=str.upper))
    doc = command_to_dict(cmd)
    assert doc['args'][0]['type'] is None

    loaded = command_from_dict(doc)
    assert loaded.get_arg('upper').validator.type_tag == 'string'


def test_load_errors():
    with pytest.raises(SchemaError, match='invalid JSON'):
        loads('{"name": ')
    with pytest.raises(SchemaError, match='unexpected keys'):
        loads('{"name": "app", "flags": []}')
    with pytest.raises(SchemaError, match='expected name'):
        loads('{"description": "nameless"}')
    with pytest.raises(SchemaError, match='to be a dict'):
        loads('["app"]')
    with pytest.raises(SchemaError, match='unexpected keys in option'):
        command_from_dict({'name': 'app', 'options': [{'name': 'x', 'char': 'y'}]})
    with pytest.raises(SchemaError, match='invalid default'):
        command_from_dict({'name': 'app',
                           'args': [{'name': 'n', 'type': 'u8', 'default': ['300']}]})
    with pytest.raises(SchemaError, match='invalid validator'):
        command_from_dict({'name': 'app', 'args': [{'name': 'n', 'type': 'u7'}]})
    with pytest.raises(SchemaError, match='invalid choices'):
        command_from_dict({'name': 'app',
                           'args': [{'name': 'n', 'type': 'u8', 'choices': ['x']}]})
