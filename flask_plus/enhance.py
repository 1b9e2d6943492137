"""Enhanced Flask applications and blueprints.

``flask_plus(app)`` and ``blueprint_plus(bp)`` wrap a routing target together
with its own ``Registry``. The wrapper's verb methods accept the extra call
shapes handled by ``flask_plus.dispatch``; its ``register_blueprint`` records
enhanced blueprints in the registry's mount ledger so the application's
document includes their routes under the right prefix.

    api = flask_plus(Flask(__name__))
    users = blueprint_plus(url_prefix='/users')
    users.get({'path': '/<int:user_id>', 'params': UserParams}, get_user)
    api.register_blueprint(users)
    api.registry.generate_openapi_document()

Anything not defined on the wrapper is looked up on the wrapped Flask object,
so ``api.config`` or ``api.test_client()`` work as usual.
"""
import itertools
from typing import Any, Optional

from flask import Blueprint, Flask
from flask_jwt_extended import JWTManager

from .config import resolve_api_options
from .dispatch import dispatch, record_mount
from .mounts import MountLedger
from .registry import Registry
from .routing import RouteRegistrar
from .security import EXTENSION_KEY

_blueprint_names = itertools.count(1)


class EnhancedTarget:
    def __init__(self, target: Any, registry: Registry):
        self.target = target
        self.registry = registry
        self._routes = RouteRegistrar(target)

    @property
    def ledger(self) -> MountLedger:
        return self.registry.mounts

    def _verb(self, method: str, args, kwargs):
        rv = dispatch(method, args, kwargs, self.registry.create_endpoint,
                      lambda *a, **kw: self._routes.register(method, *a, **kw))
        return self if rv is None else rv

    def get(self, *args, **kwargs):
        return self._verb('get', args, kwargs)

    def post(self, *args, **kwargs):
        return self._verb('post', args, kwargs)

    def put(self, *args, **kwargs):
        return self._verb('put', args, kwargs)

    def delete(self, *args, **kwargs):
        return self._verb('delete', args, kwargs)

    def patch(self, *args, **kwargs):
        return self._verb('patch', args, kwargs)

    def options(self, *args, **kwargs):
        return self._verb('options', args, kwargs)

    def head(self, *args, **kwargs):
        return self._verb('head', args, kwargs)

    def register_blueprint(self, blueprint: Any, **options: Any):
        """Register a plain or enhanced blueprint on the wrapped target."""
        if isinstance(blueprint, EnhancedTarget):
            mount_path = options.get('url_prefix') or blueprint.target.url_prefix or '/'
            record_mount(self.ledger, blueprint, mount_path)
            blueprint = blueprint.target
        self.target.register_blueprint(blueprint, **options)
        return self

    def use(self, path_or_sub: Any, sub: Any = None, **options: Any):
        """``use(sub)`` / ``use('/prefix', sub)``; plain callables become before-request hooks."""
        if sub is None:
            sub, path = path_or_sub, None
        else:
            path = path_or_sub
        if isinstance(sub, (EnhancedTarget, Blueprint)):
            if path is not None:
                options['url_prefix'] = path
            return self.register_blueprint(sub, **options)
        if callable(sub) and path is None:
            self.target.before_request(sub)
            return self
        raise TypeError(f'Cannot use {type(sub).__name__} here; expected a blueprint or a callable')

    def __getattr__(self, name: str):
        if name == 'target':
            raise AttributeError(name)
        return getattr(self.target, name)

    def __repr__(self):
        return f'<{type(self).__name__} {getattr(self.target, "name", self.target)!r}>'


class FlaskPlus(EnhancedTarget):
    target: Flask

    def openapi(self, config: Any = None):
        return self.registry.generate_openapi_document(config)


class BlueprintPlus(EnhancedTarget):
    target: Blueprint


def flask_plus(app: Flask, opts: Any = None) -> FlaskPlus:
    """Enhance a Flask application with documented, validated routes."""
    registry = Registry(resolve_api_options(opts, app.config))
    if 'flask-jwt-extended' not in app.extensions:
        JWTManager(app)
    app.extensions[EXTENSION_KEY] = registry
    return FlaskPlus(app, registry)


def blueprint_plus(
    blueprint: Optional[Blueprint] = None,
    opts: Any = None,
    *,
    name: Optional[str] = None,
    import_name: Optional[str] = None,
    url_prefix: Optional[str] = None,
) -> BlueprintPlus:
    """Enhance a blueprint, creating one when none is given."""
    if blueprint is None:
        blueprint = Blueprint(
            name or f'blueprint_plus_{next(_blueprint_names)}',
            import_name or __name__,
            url_prefix=url_prefix,
        )
    return BlueprintPlus(blueprint, Registry(resolve_api_options(opts)))


__all__ = ['EnhancedTarget', 'FlaskPlus', 'BlueprintPlus', 'flask_plus', 'blueprint_plus']
