import re

import pytest
from flask_plus.dispatch import OptionsFirst, Passthrough, PathWithOptions, classify_call, dispatch
from flask_plus.errors import ConfigurationError
from flask_plus.options import EndpointOptions


def handler():
    return 'ok'


def other():
    return 'other'


class Recorder:
    def __init__(self):
        self.endpoint_calls = []
        self.register_calls = []

    def create_endpoint(self, method, path, options=None):
        self.endpoint_calls.append((method, path, options))
        return self.middleware

    def middleware(self, **view_args):
        return None

    def register(self, *args, **kwargs):
        self.register_calls.append((args, kwargs))


def test_classify_options_first():
    shape = classify_call(({'path': '/x'}, handler))
    assert isinstance(shape, OptionsFirst)
    assert shape.handlers == (handler,)


def test_classify_endpoint_options_instance():
    shape = classify_call((EndpointOptions(path='/x'), handler, other))
    assert isinstance(shape, OptionsFirst)
    assert shape.handlers == (handler, other)


def test_classify_path_with_options():
    shape = classify_call(('/x', {'body': dict}, handler))
    assert isinstance(shape, PathWithOptions)
    assert shape.path == '/x'


@pytest.mark.parametrize('args', [
    ('/x', handler),
    ('/x', {'body': dict}),
    ({'path': '/x'},),
    (re.compile(r'/x\d+'), handler),
    (['/a', '/b'], handler),
    (('/a', '/b'), handler),
    ('/x', ['/y'], handler),
    ('/x', re.compile('y'), handler),
    (),
])
def test_classify_passthrough(args):
    assert isinstance(classify_call(args), Passthrough)


def test_options_first_registers_middleware_before_handler():
    rec = Recorder()
    dispatch('post', ({'path': '/x', 'summary': 'X'}, handler, other), {}, rec.create_endpoint, rec.register)
    assert len(rec.endpoint_calls) == 1
    method, path, options = rec.endpoint_calls[0]
    assert (method, path) == ('post', '/x')
    assert options.summary == 'X'
    assert rec.register_calls == [(('/x', rec.middleware, handler, other), {})]


def test_path_with_options_produces_identical_registration():
    first, second = Recorder(), Recorder()
    dispatch('post', ({'path': '/x', 'body': dict}, handler), {}, first.create_endpoint, first.register)
    dispatch('post', ('/x', {'body': dict}, handler), {}, second.create_endpoint, second.register)
    assert first.register_calls[0][0][0] == second.register_calls[0][0][0] == '/x'
    assert first.register_calls[0][0][2:] == second.register_calls[0][0][2:] == (handler,)
    assert first.endpoint_calls[0][2].body is second.endpoint_calls[0][2].body is dict


def test_passthrough_forwards_unchanged():
    rec = Recorder()
    dispatch('post', ('/x', handler), {'endpoint': 'named'}, rec.create_endpoint, rec.register)
    assert rec.endpoint_calls == []
    assert rec.register_calls == [(('/x', handler), {'endpoint': 'named'})]


def test_missing_path_fails_before_registration():
    rec = Recorder()
    with pytest.raises(ConfigurationError) as exc:
        dispatch('post', ({'body': dict}, handler), {}, rec.create_endpoint, rec.register)
    assert 'post' in str(exc.value)
    assert rec.endpoint_calls == []
    assert rec.register_calls == []


def test_unknown_option_is_a_configuration_error():
    rec = Recorder()
    with pytest.raises(ConfigurationError):
        dispatch('get', ({'path': '/x', 'bogus': 1}, handler), {}, rec.create_endpoint, rec.register)
    assert rec.register_calls == []


def test_camel_case_operation_id_is_accepted():
    rec = Recorder()
    dispatch('get', ({'path': '/x', 'operationId': 'getX'}, handler), {}, rec.create_endpoint, rec.register)
    assert rec.endpoint_calls[0][2].operation_id == 'getX'
