import os, sys, pytest
# Ensure project root is on path so 'flask_plus' and 'scripts' can be imported without install
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from flask import Flask
from flask_plus import flask_plus, register_error_handlers
from tests.sample_app import create_app


@pytest.fixture()
def api():
    return create_app({'TESTING': True})


@pytest.fixture()
def app_instance(api):
    return api.target


@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()


@pytest.fixture()
def bare_api():
    """Enhanced app with no routes registered."""
    app = Flask('bare')
    app.config.update(TESTING=True, JWT_SECRET_KEY='bare-secret')
    api = flask_plus(app)
    register_error_handlers(app)
    return api
