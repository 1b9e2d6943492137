from __future__ import annotations
"""Document-level configuration for enhanced applications and blueprints.

Values are resolved with this precedence (highest first):
  1. explicit ``ApiOptions`` / ``OpenAPIConfig`` passed to the setup call
  2. Flask ``app.config`` keys
  3. environment variables (a ``.env`` file is loaded on import)

Recognized keys: OPENAPI_TITLE, OPENAPI_VERSION, OPENAPI_DESCRIPTION,
OPENAPI_SERVER_URL, OPENAPI_SPEC_PATH, OPENAPI_DOCS_PATH.
"""
import os
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigurationError

load_dotenv()

DEFAULT_OPENAPI_VERSION = '3.0.3'
DEFAULT_TITLE = 'API'
DEFAULT_API_VERSION = '1.0.0'
DEFAULT_SPEC_PATH = '/openapi.json'
DEFAULT_DOCS_PATH = '/docs'

# camelCase spellings accepted in mapping-style options
_ALIASES = {
    'defaultQuerySchema': 'default_query_schema',
    'defaultHeaderSchema': 'default_header_schema',
    'defaultResponses': 'default_responses',
    'openApiConfig': 'openapi_config',
}


def config_value(name: str, app_config: Optional[Mapping[str, Any]] = None, default: Any = None) -> Any:
    if app_config is not None and app_config.get(name) is not None:
        return app_config[name]
    return os.getenv(name, default)


@dataclass
class OpenAPIConfig:
    openapi: str = DEFAULT_OPENAPI_VERSION
    info: Dict[str, Any] = field(default_factory=lambda: {'title': DEFAULT_TITLE, 'version': DEFAULT_API_VERSION})
    servers: List[Dict[str, Any]] = field(default_factory=list)
    security: List[Dict[str, List[str]]] = field(default_factory=list)

    @classmethod
    def coerce(cls, value: Any) -> 'OpenAPIConfig':
        if isinstance(value, OpenAPIConfig):
            return value
        if not isinstance(value, Mapping):
            raise ConfigurationError(f'OpenAPI config must be a mapping, got {type(value).__name__}')
        known = {f.name for f in fields(cls)}
        unknown = set(value) - known
        if unknown:
            raise ConfigurationError(f'Unknown OpenAPI config keys: {sorted(unknown)}')
        return cls(**dict(value))


@dataclass
class ApiOptions:
    default_query_schema: Any = None
    default_header_schema: Any = None
    default_responses: Optional[Dict[Any, Any]] = None
    openapi_config: Optional[OpenAPIConfig] = None

    @classmethod
    def coerce(cls, value: Any) -> 'ApiOptions':
        if value is None:
            return cls()
        if isinstance(value, ApiOptions):
            return value
        if not isinstance(value, Mapping):
            raise ConfigurationError(f'API options must be a mapping, got {type(value).__name__}')
        known = {f.name for f in fields(cls)}
        data: Dict[str, Any] = {}
        for key, val in value.items():
            name = _ALIASES.get(key, key)
            if name not in known:
                raise ConfigurationError(f'Unknown API option {key!r}')
            data[name] = val
        if data.get('openapi_config') is not None:
            data['openapi_config'] = OpenAPIConfig.coerce(data['openapi_config'])
        return cls(**data)


def openapi_config_from(app_config: Optional[Mapping[str, Any]] = None) -> OpenAPIConfig:
    """Build an ``OpenAPIConfig`` from Flask config and the environment."""
    info: Dict[str, Any] = {
        'title': config_value('OPENAPI_TITLE', app_config, DEFAULT_TITLE),
        'version': config_value('OPENAPI_VERSION', app_config, DEFAULT_API_VERSION),
    }
    description = config_value('OPENAPI_DESCRIPTION', app_config)
    if description:
        info['description'] = description
    server_url = config_value('OPENAPI_SERVER_URL', app_config)
    servers = [{'url': server_url}] if server_url else []
    return OpenAPIConfig(info=info, servers=servers)


def resolve_api_options(opts: Any = None, app_config: Optional[Mapping[str, Any]] = None) -> ApiOptions:
    options = ApiOptions.coerce(opts)
    if options.openapi_config is None:
        options = replace(options, openapi_config=openapi_config_from(app_config))
    return options


__all__ = [
    'ApiOptions',
    'OpenAPIConfig',
    'config_value',
    'openapi_config_from',
    'resolve_api_options',
    'DEFAULT_OPENAPI_VERSION',
    'DEFAULT_SPEC_PATH',
    'DEFAULT_DOCS_PATH',
]
