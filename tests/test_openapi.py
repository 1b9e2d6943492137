from flask import Flask
from flask_plus import blueprint_plus, flask_plus, serve_docs


def test_openapi_spec_available(client):
    resp = client.get('/openapi.json')
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['openapi'].startswith('3.')
    assert body['info']['title'] == 'Sample API'
    assert '/healthz' in body['paths']
    assert set(body['paths']['/users/']) == {'get', 'post'}
    assert set(body['paths']['/users/{user_id}']) == {'get', 'delete'}


def test_docs_page(client):
    resp = client.get('/docs')
    assert resp.status_code == 200
    assert b'redoc' in resp.data
    assert b'/openapi.json' in resp.data


def test_components_collected_from_mounted_blueprint(client):
    spec = client.get('/openapi.json').get_json()
    assert {'User', 'NewUser'} <= set(spec['components']['schemas'])
    assert 'BearerAuth' in spec['components']['securitySchemes']
    listing = spec['paths']['/users/']['get']['responses']['200']['content']['application/json']['schema']
    assert listing == {'type': 'array', 'items': {'$ref': '#/components/schemas/User'}}
    delete = spec['paths']['/users/{user_id}']['delete']
    assert delete['security'] == [{'BearerAuth': []}]


def test_path_parameters_documented(client):
    spec = client.get('/openapi.json').get_json()
    params = spec['paths']['/users/{user_id}']['get']['parameters']
    assert params == [{'name': 'user_id', 'in': 'path', 'required': True, 'schema': {'type': 'integer'}}]


def test_document_is_stable_across_requests(client):
    first = client.get('/openapi.json').get_json()
    second = client.get('/openapi.json').get_json()
    assert first == second


def test_blueprint_mounted_after_setup_is_documented(api):
    late = blueprint_plus(name='late')
    late.get({'path': '/ping'}, lambda: 'pong')
    api.register_blueprint(late, url_prefix='/late')
    client = api.test_client()
    assert client.get('/late/ping').data == b'pong'
    assert '/late/ping' in client.get('/openapi.json').get_json()['paths']


def test_nested_blueprints_are_documented_under_every_prefix():
    app = Flask('nested')
    api = flask_plus(app)
    serve_docs(api)

    items = blueprint_plus(name='items')
    items.get({'path': '/<int:item_id>', 'summary': 'Get item'}, lambda item_id: {'id': item_id})
    v1 = blueprint_plus(name='v1')
    v1.get({'path': '/status'}, lambda: 'v1 ok')
    v1.register_blueprint(items, url_prefix='/items')
    api.register_blueprint(v1, url_prefix='/api/v1')

    client = app.test_client()
    assert client.get('/api/v1/items/3').get_json() == {'id': 3}
    paths = client.get('/openapi.json').get_json()['paths']
    assert set(paths) == {'/api/v1/status', '/api/v1/items/{item_id}'}
    assert paths['/api/v1/items/{item_id}']['get']['summary'] == 'Get item'
    # the mounted registries keep their own unprefixed view
    assert [d.path for d in items.registry.path_definitions()] == ['/{item_id}']


def test_repeated_generation_adds_nothing(api):
    api.registry.generate_openapi_document()
    count = len(api.registry.definitions)
    api.registry.generate_openapi_document()
    assert len(api.registry.definitions) == count


def test_passthrough_routes_not_documented(api):
    api.get('/undocumented', lambda: 'x')
    assert '/undocumented' not in api.openapi()['paths']


def test_blueprint_under_converter_prefix_documents_prefix_parameter(bare_api):
    items = blueprint_plus(name='org_items')
    items.get({'path': '/<int:item_id>'}, lambda org_id, item_id: {'org': org_id, 'id': item_id})
    bare_api.register_blueprint(items, url_prefix='/orgs/<int:org_id>/items')

    assert bare_api.test_client().get('/orgs/7/items/3').get_json() == {'org': 7, 'id': 3}
    paths = bare_api.openapi()['paths']
    assert set(paths) == {'/orgs/{org_id}/items/{item_id}'}
    params = paths['/orgs/{org_id}/items/{item_id}']['get']['parameters']
    assert params == [
        {'name': 'org_id', 'in': 'path', 'required': True, 'schema': {'type': 'integer'}},
        {'name': 'item_id', 'in': 'path', 'required': True, 'schema': {'type': 'integer'}},
    ]
