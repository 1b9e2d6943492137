"""Definition model for documented API elements.

A registry holds an ordered list of three kinds of definition:
  PathDefinition       one method + path operation, keyed by (method, path)
  NamedDefinition      a reusable component, keyed by (kind, name)
  AnonymousDefinition  a component without a name, keyed by its schema value

The keys are the only de-duplication contract used when registries merge.
"""
import copy
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Tuple, Union

HTTP_METHODS = ('get', 'post', 'put', 'delete', 'patch', 'options', 'head')

# component kind -> section under components/ in the generated document
COMPONENT_SECTIONS = {
    'schema': 'schemas',
    'response': 'responses',
    'parameter': 'parameters',
    'securityScheme': 'securitySchemes',
}


def canonical_json(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(',', ':'), default=str)


@dataclass(frozen=True, eq=False)
class PathDefinition:
    method: str
    path: str
    operation: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'method', self.method.lower())

    @property
    def key(self) -> Tuple[Hashable, ...]:
        return ('path', self.method, self.path)

    def with_path(self, path: str) -> 'PathDefinition':
        return PathDefinition(self.method, path, copy.deepcopy(self.operation))

    def __eq__(self, other):
        if not isinstance(other, PathDefinition):
            return NotImplemented
        return self.key == other.key

    def __hash__(self):
        return hash(self.key)


@dataclass(frozen=True, eq=False)
class NamedDefinition:
    kind: str
    name: str
    schema: Any = None

    @property
    def key(self) -> Tuple[Hashable, ...]:
        return (self.kind, self.name)

    def __eq__(self, other):
        if not isinstance(other, NamedDefinition):
            return NotImplemented
        return self.key == other.key

    def __hash__(self):
        return hash(self.key)


@dataclass(frozen=True, eq=False)
class AnonymousDefinition:
    kind: str
    schema: Any = None

    @property
    def key(self) -> Tuple[Hashable, ...]:
        # structural identity; the None marks "no name" so it never collides with a NamedDefinition key
        return (self.kind, None, canonical_json(self.schema))

    def __eq__(self, other):
        if not isinstance(other, AnonymousDefinition):
            return NotImplemented
        return self.key == other.key

    def __hash__(self):
        return hash(self.key)


Definition = Union[PathDefinition, NamedDefinition, AnonymousDefinition]


__all__ = [
    'HTTP_METHODS',
    'COMPONENT_SECTIONS',
    'PathDefinition',
    'NamedDefinition',
    'AnonymousDefinition',
    'Definition',
    'canonical_json',
]
