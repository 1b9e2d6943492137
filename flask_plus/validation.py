from __future__ import annotations
"""Request validation middleware backed by pydantic.

The middleware returned by ``build_validator`` runs before the route's own
handlers. On success it stores the parsed values on ``flask.g.parsed`` and
returns None so the chain continues; on failure it returns a 400 response in
the standard error shape with an ``issues`` list and the handlers never run.

Usage:
    def create_user():
        user = g.parsed.body  # NewUser instance
        ...

    api.post('/users', {'body': NewUser}, create_user)
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from flask import g, request
from pydantic import TypeAdapter, ValidationError

from .errors import error_payload
from .options import EndpointOptions
from .schemas import query_list_fields
from .security import verify_bearer

LOCATIONS = ('params', 'query', 'headers', 'body')


@dataclass
class ParsedRequest:
    body: Any = None
    params: Any = None
    query: Any = None
    headers: Any = None


def _adapter(schema: Any) -> Optional[TypeAdapter]:
    # raw JSON-schema dicts are documented but not evaluated
    if schema is None or isinstance(schema, dict):
        return None
    return TypeAdapter(schema)


def _query_dict(list_fields: set) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key in request.args:
        values = request.args.getlist(key)
        out[key] = values if key in list_fields or len(values) > 1 else values[0]
    return out


def _headers_dict() -> Dict[str, Any]:
    return {k.lower().replace('-', '_'): v for k, v in request.headers.items()}


def _raw_value(location: str, view_args: Dict[str, Any], list_fields: set) -> Any:
    if location == 'params':
        return dict(view_args)
    if location == 'query':
        return _query_dict(list_fields)
    if location == 'headers':
        return _headers_dict()
    return request.get_json(silent=True)


def validation_error_response(issues: List[Dict[str, Any]]):
    return error_payload(400, 'Bad Request', 'Request validation failed', issues=issues), 400


def build_validator(
    options: EndpointOptions,
    bearer_required: Optional[Callable[[], bool]] = None,
) -> Callable[..., Any]:
    adapters = {loc: _adapter(getattr(options, loc)) for loc in LOCATIONS}
    list_fields = query_list_fields(options.query)

    def validate_request(**view_args):
        if bearer_required is not None and bearer_required():
            verify_bearer()
        parsed = ParsedRequest()
        issues: List[Dict[str, Any]] = []
        for location in LOCATIONS:
            raw = _raw_value(location, view_args, list_fields)
            adapter = adapters[location]
            if adapter is None:
                setattr(parsed, location, raw)
                continue
            try:
                setattr(parsed, location, adapter.validate_python(raw))
            except ValidationError as e:
                for err in e.errors():
                    issues.append({
                        'in': location,
                        'loc': [str(part) for part in err['loc']],
                        'msg': err['msg'],
                        'type': err['type'],
                    })
        if issues:
            return validation_error_response(issues)
        g.parsed = parsed
        return None

    return validate_request


__all__ = ['ParsedRequest', 'build_validator', 'validation_error_response']
