"""Per-endpoint options accepted by the enhanced verb methods.

Options can be given as an ``EndpointOptions`` instance or as a plain mapping;
camelCase keys (``operationId``) are accepted alongside snake_case ones.
"""
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional

from .errors import ConfigurationError

_ALIASES = {'operationId': 'operation_id'}


@dataclass
class EndpointOptions:
    path: Optional[str] = None
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    deprecated: bool = False
    tags: List[str] = field(default_factory=list)
    body: Any = None
    params: Any = None
    query: Any = None
    headers: Any = None
    responses: Dict[Any, Any] = field(default_factory=dict)
    security: Optional[List[Dict[str, List[str]]]] = None

    @classmethod
    def coerce(cls, value: Any) -> 'EndpointOptions':
        if value is None:
            return cls()
        if isinstance(value, EndpointOptions):
            return value
        if not isinstance(value, Mapping):
            raise ConfigurationError(f'Endpoint options must be a mapping, got {type(value).__name__}')
        known = {f.name for f in fields(cls)}
        data: Dict[str, Any] = {}
        for key, val in value.items():
            name = _ALIASES.get(key, key)
            if name not in known:
                raise ConfigurationError(f'Unknown endpoint option {key!r}')
            data[name] = val
        return cls(**data)


__all__ = ['EndpointOptions']
