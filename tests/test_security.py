from flask_jwt_extended import create_access_token
from flask_plus import blueprint_plus


def _token(app):
    with app.app_context():
        return create_access_token(identity='1')


def test_secured_endpoint_requires_token(client):
    resp = client.delete('/users/1')
    assert resp.status_code == 401


def test_secured_endpoint_accepts_token(client, app_instance):
    client.post('/users/', json={'name': 'Ada', 'email': 'ada@example.com'})
    headers = {'Authorization': f'Bearer {_token(app_instance)}'}
    resp = client.delete('/users/1', headers=headers)
    assert resp.status_code == 204
    assert client.get('/users/1').status_code == 404


def test_unsecured_endpoints_stay_open(client):
    assert client.get('/users/').status_code == 200


def test_security_on_unknown_scheme_is_documentation_only(bare_api):
    bare_api.get({'path': '/keyed', 'security': [{'ApiKey': []}]}, lambda: 'open')
    assert bare_api.test_client().get('/keyed').status_code == 200
    op = bare_api.registry.generate_openapi_document()['paths']['/keyed']['get']
    assert op['security'] == [{'ApiKey': []}]


def test_blueprint_route_enforces_scheme_registered_on_app(bare_api):
    bare_api.registry.register_security_scheme('BearerAuth', {'type': 'http', 'scheme': 'bearer'})
    admin = blueprint_plus(name='admin')
    admin.delete({'path': '/<int:item_id>', 'security': [{'BearerAuth': []}]}, lambda item_id: ('', 204))
    bare_api.register_blueprint(admin, url_prefix='/admin')

    client = bare_api.test_client()
    assert client.delete('/admin/1').status_code == 401
    headers = {'Authorization': f'Bearer {_token(bare_api.target)}'}
    assert client.delete('/admin/1', headers=headers).status_code == 204
    doc = bare_api.openapi()
    assert doc['paths']['/admin/{item_id}']['delete']['security'] == [{'BearerAuth': []}]
    assert 'BearerAuth' in doc['components']['securitySchemes']


def test_scheme_registered_after_route_is_enforced(bare_api):
    bare_api.get({'path': '/late', 'security': [{'LateAuth': []}]}, lambda: 'secret')
    client = bare_api.test_client()
    assert client.get('/late').status_code == 200
    bare_api.registry.register_security_scheme('LateAuth', {'type': 'http', 'scheme': 'bearer'})
    assert client.get('/late').status_code == 401


def test_scheme_on_sibling_blueprint_is_enforced(bare_api):
    auth = blueprint_plus(name='auth')
    auth.registry.register_security_scheme('BearerAuth', {'type': 'http', 'scheme': 'bearer'})
    reports = blueprint_plus(name='reports')
    reports.get({'path': '/', 'security': [{'BearerAuth': []}]}, lambda: 'report')
    bare_api.register_blueprint(auth, url_prefix='/auth')
    bare_api.register_blueprint(reports, url_prefix='/reports')
    assert bare_api.test_client().get('/reports/').status_code == 401
