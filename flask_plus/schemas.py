"""Translate pydantic schemas and Flask rules into OpenAPI fragments.

Models become named ``schema`` components referenced through
``#/components/schemas/{model}``; nested ``$defs`` are hoisted into their own
named components. Non-model types (``list[int]``, raw JSON-schema dicts) are
inlined and tracked as anonymous definitions.
"""
import copy
import re
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, TypeAdapter

from .definitions import AnonymousDefinition, Definition, NamedDefinition

REF_TEMPLATE = '#/components/schemas/{model}'

_RULE_VARIABLE = re.compile(r'<(?:([^<>:]+):)?([^<>:]+)>')

_CONVERTER_TYPES = {
    'int': {'type': 'integer'},
    'float': {'type': 'number'},
    'uuid': {'type': 'string', 'format': 'uuid'},
}


def is_model(value: Any) -> bool:
    return isinstance(value, type) and issubclass(value, BaseModel)


def model_name(model: type) -> str:
    cfg = getattr(model, 'model_config', {}) or {}
    title = cfg.get('title')
    return str(title) if title else model.__name__


def openapi_path(rule: str) -> str:
    """'/users/<int:user_id>' -> '/users/{user_id}'"""
    return _RULE_VARIABLE.sub(lambda m: '{' + m.group(2) + '}', rule)


def rule_variables(rule: str) -> List[Tuple[str, Dict[str, Any]]]:
    out = []
    for m in _RULE_VARIABLE.finditer(rule):
        converter = (m.group(1) or 'string').split('(', 1)[0]
        out.append((m.group(2), dict(_CONVERTER_TYPES.get(converter, {'type': 'string'}))))
    return out


def json_schema(schema: Any) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Return (schema document, hoisted $defs) for a model, type or raw dict."""
    if isinstance(schema, dict):
        doc = copy.deepcopy(schema)
    elif is_model(schema):
        doc = schema.model_json_schema(ref_template=REF_TEMPLATE)
    else:
        doc = TypeAdapter(schema).json_schema(ref_template=REF_TEMPLATE)
    defs = doc.pop('$defs', {})
    return doc, defs


def _named(defs: Dict[str, Any]) -> List[Definition]:
    return [NamedDefinition('schema', name, body) for name, body in defs.items()]


def schema_reference(schema: Any) -> Tuple[Dict[str, Any], List[Definition]]:
    """Return the schema object to embed plus the component definitions it needs."""
    doc, defs = json_schema(schema)
    components = _named(defs)
    if is_model(schema):
        name = model_name(schema)
        components.append(NamedDefinition('schema', name, doc))
        return {'$ref': REF_TEMPLATE.format(model=name)}, components
    components.append(AnonymousDefinition('schema', copy.deepcopy(doc)))
    return doc, components


def parameters_for(schema: Any, location: str) -> Tuple[List[Dict[str, Any]], List[Definition]]:
    """Expand an object schema into OpenAPI parameters for one location."""
    doc, defs = json_schema(schema)
    required = set(doc.get('required', []))
    params = []
    for name, prop in (doc.get('properties') or {}).items():
        prop = dict(prop)
        description = prop.pop('description', None)
        prop.pop('title', None)
        param: Dict[str, Any] = {
            'name': name.replace('_', '-') if location == 'header' else name,
            'in': location,
            'required': location == 'path' or name in required,
            'schema': prop,
        }
        if description:
            param['description'] = description
        params.append(param)
    return params, _named(defs)


def response_object(response: Any) -> Tuple[Dict[str, Any], List[Definition]]:
    """Normalize one response entry.

    Accepts a component name (str), a model (documented as JSON content) or
    a response mapping whose ``content.*.schema`` may hold models.
    """
    if isinstance(response, str):
        return {'$ref': f'#/components/responses/{response}'}, []
    if response is None or is_model(response):
        obj: Dict[str, Any] = {'description': 'OK'}
        if response is None:
            return obj, []
        ref, components = schema_reference(response)
        obj['content'] = {'application/json': {'schema': ref}}
        return obj, components
    obj = {k: v for k, v in response.items() if k != 'content'}
    obj.setdefault('description', '')
    components: List[Definition] = []
    content = response.get('content')
    if content:
        obj['content'] = {}
        for media_type, media in content.items():
            media = dict(media)
            if media.get('schema') is not None:
                media['schema'], extra = schema_reference(media['schema'])
                components.extend(extra)
            obj['content'][media_type] = media
    return obj, components


def query_list_fields(schema: Optional[Any]) -> set:
    """Names of model fields that accept repeated query parameters."""
    out = set()
    for name, info in (getattr(schema, 'model_fields', None) or {}).items():
        annotation = info.annotation
        origin = getattr(annotation, '__origin__', None)
        if origin in (list, tuple, set, frozenset):
            out.add(info.alias or name)
    return out


__all__ = [
    'REF_TEMPLATE',
    'is_model',
    'model_name',
    'openapi_path',
    'rule_variables',
    'json_schema',
    'schema_reference',
    'parameters_for',
    'response_object',
    'query_list_fields',
]
