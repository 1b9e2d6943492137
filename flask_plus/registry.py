"""Registry of documented API elements for one application or blueprint.

The registry owns an ordered list of definitions plus document metadata. It
is the validation-middleware factory used by the dispatcher
(``create_endpoint``) and produces the final OpenAPI document, composing the
registries mounted beneath it first.

Configuration methods return the registry so calls can be chained::

    registry.set_info('Shop API', '2.0.0').add_server('https://api.example.com')
"""
import copy
import dataclasses
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from .composition import compose, registries_under
from .config import ApiOptions, OpenAPIConfig
from .definitions import (
    COMPONENT_SECTIONS,
    HTTP_METHODS,
    AnonymousDefinition,
    Definition,
    NamedDefinition,
    PathDefinition,
)
from .errors import ConfigurationError
from .mounts import MountLedger
from .options import EndpointOptions
from .schemas import (
    is_model,
    model_name,
    openapi_path,
    parameters_for,
    response_object,
    rule_variables,
    schema_reference,
    json_schema,
)
from .security import bearer_check, is_bearer_scheme
from .validation import build_validator

logger = logging.getLogger(__name__)


class Registry:
    def __init__(self, options: Optional[ApiOptions] = None, mounts: Optional[MountLedger] = None):
        opts = options or ApiOptions()
        cfg = opts.openapi_config or OpenAPIConfig()
        self.definitions: List[Definition] = []
        self.mounts = mounts if mounts is not None else MountLedger()
        self.openapi_version = cfg.openapi
        self.info: Dict[str, Any] = dict(cfg.info)
        self.servers: List[Dict[str, Any]] = list(cfg.servers)
        self.security: List[Dict[str, List[str]]] = list(cfg.security)
        self.default_query_schema = opts.default_query_schema
        self.default_header_schema = opts.default_header_schema
        self.default_responses: Dict[Any, Any] = dict(opts.default_responses or {})

    # -- definitions -------------------------------------------------------
    def add_definition(self, definition: Definition) -> bool:
        """Append definition unless one with the same key exists (first wins)."""
        key = definition.key
        if any(existing.key == key for existing in self.definitions):
            return False
        self.definitions.append(definition)
        return True

    def path_definitions(self) -> List[PathDefinition]:
        return [d for d in self.definitions if isinstance(d, PathDefinition)]

    def register_schema(self, schema: Any, name: Optional[str] = None) -> 'Registry':
        """Register a reusable schema; unnamed non-model schemas are anonymous."""
        doc, defs = json_schema(schema)
        for def_name, body in defs.items():
            self.add_definition(NamedDefinition('schema', def_name, body))
        if name is None and not is_model(schema):
            self.add_definition(AnonymousDefinition('schema', doc))
        else:
            self.add_definition(NamedDefinition('schema', name or model_name(schema), doc))
        return self

    def register_response(self, name: str, response: Any) -> 'Registry':
        obj, components = response_object(response)
        for c in components:
            self.add_definition(c)
        self.add_definition(NamedDefinition('response', name, obj))
        return self

    def register_security_scheme(self, name: str, scheme: Mapping[str, Any]) -> 'Registry':
        self.add_definition(NamedDefinition('securityScheme', name, dict(scheme)))
        return self

    # -- document metadata -------------------------------------------------
    def set_info(self, title: str, version: str, description: Optional[str] = None) -> 'Registry':
        self.info = {'title': title, 'version': version}
        if description:
            self.info['description'] = description
        return self

    def add_server(self, url: str, description: Optional[str] = None) -> 'Registry':
        server = {'url': url}
        if description:
            server['description'] = description
        self.servers.append(server)
        return self

    def add_security_requirement(self, name: str, scopes: Optional[List[str]] = None) -> 'Registry':
        self.security.append({name: list(scopes or [])})
        return self

    def set_default_query_schema(self, schema: Any) -> 'Registry':
        self.default_query_schema = schema
        return self

    def set_default_header_schema(self, schema: Any) -> 'Registry':
        self.default_header_schema = schema
        return self

    def set_default_responses(self, responses: Mapping[Any, Any]) -> 'Registry':
        self.default_responses = dict(responses)
        return self

    # -- endpoints ---------------------------------------------------------
    def bearer_schemes(self, transitive: bool = False) -> set:
        """Names of http/bearer schemes; ``transitive`` includes mounted registries."""
        registries = registries_under(self) if transitive else [self]
        return {
            d.name for r in registries for d in (getattr(r, 'definitions', None) or [])
            if isinstance(d, NamedDefinition) and d.kind == 'securityScheme' and is_bearer_scheme(d.schema)
        }

    def _with_defaults(self, opts: EndpointOptions) -> EndpointOptions:
        updates: Dict[str, Any] = {}
        if opts.query is None and self.default_query_schema is not None:
            updates['query'] = self.default_query_schema
        if opts.headers is None and self.default_header_schema is not None:
            updates['headers'] = self.default_header_schema
        if self.default_responses:
            responses = {str(k): v for k, v in self.default_responses.items()}
            responses.update({str(k): v for k, v in (opts.responses or {}).items()})
            updates['responses'] = responses
        return dataclasses.replace(opts, **updates) if updates else opts

    def _build_operation(self, path: str, opts: EndpointOptions):
        components: List[Definition] = []
        operation: Dict[str, Any] = {}
        if opts.operation_id:
            operation['operationId'] = opts.operation_id
        if opts.summary:
            operation['summary'] = opts.summary
        if opts.description:
            operation['description'] = opts.description
        if opts.tags:
            operation['tags'] = list(opts.tags)
        if opts.deprecated:
            operation['deprecated'] = True

        parameters: List[Dict[str, Any]] = []
        if opts.params is not None:
            params, extra = parameters_for(opts.params, 'path')
            parameters.extend(params)
            components.extend(extra)
        declared = {p['name'] for p in parameters}
        for name, schema in rule_variables(path):
            if name not in declared:
                parameters.append({'name': name, 'in': 'path', 'required': True, 'schema': schema})
        for location, schema in (('query', opts.query), ('header', opts.headers)):
            if schema is not None:
                params, extra = parameters_for(schema, location)
                parameters.extend(params)
                components.extend(extra)
        if parameters:
            operation['parameters'] = parameters

        if opts.body is not None:
            ref, extra = schema_reference(opts.body)
            components.extend(extra)
            operation['requestBody'] = {'required': True, 'content': {'application/json': {'schema': ref}}}

        responses: Dict[str, Any] = {}
        for status, response in (opts.responses or {}).items():
            obj, extra = response_object(response)
            components.extend(extra)
            responses[str(status)] = obj
        operation['responses'] = responses or {'200': {'description': 'OK'}}

        if opts.security is not None:
            operation['security'] = [dict(r) for r in opts.security]
        return operation, components

    def create_endpoint(self, method: str, path: str, options: Any = None) -> Callable[..., Any]:
        """Document ``method path`` and return its validation middleware."""
        method = method.lower()
        if method not in HTTP_METHODS:
            raise ConfigurationError(f'Unsupported HTTP method {method!r}')
        opts = self._with_defaults(EndpointOptions.coerce(options))
        operation, components = self._build_operation(path, opts)
        for component in components:
            self.add_definition(component)
        if not self.add_definition(PathDefinition(method, openapi_path(path), operation)):
            logger.debug('%s %s already documented; keeping the first registration', method.upper(), path)
        return build_validator(opts, bearer_check(opts.security, self))

    # -- document ----------------------------------------------------------
    def generate_openapi_document(self, config: Any = None) -> Dict[str, Any]:
        """Compose mounted registries into this one, then build the document.

        ``config`` (mapping or ``OpenAPIConfig``) overrides ``openapi``,
        ``info``, ``servers`` and ``security`` for this call only.
        """
        compose(self, self.mounts)
        if isinstance(config, OpenAPIConfig):
            config = dataclasses.asdict(config)
        cfg: Mapping[str, Any] = config or {}

        paths: Dict[str, Dict[str, Any]] = {}
        components: Dict[str, Dict[str, Any]] = {section: {} for section in COMPONENT_SECTIONS.values()}
        for d in self.definitions:
            if isinstance(d, PathDefinition):
                paths.setdefault(d.path, {})[d.method] = copy.deepcopy(d.operation)
            elif isinstance(d, NamedDefinition) and d.kind in COMPONENT_SECTIONS:
                components[COMPONENT_SECTIONS[d.kind]][d.name] = copy.deepcopy(d.schema)

        doc: Dict[str, Any] = {
            'openapi': cfg.get('openapi', self.openapi_version),
            'info': {**self.info, **cfg.get('info', {})},
        }
        servers = cfg.get('servers', self.servers)
        if servers:
            doc['servers'] = list(servers)
        security = cfg.get('security', self.security)
        if security:
            doc['security'] = list(security)
        doc['paths'] = paths
        doc['components'] = {section: body for section, body in components.items() if body}
        return doc


__all__ = ['Registry']
