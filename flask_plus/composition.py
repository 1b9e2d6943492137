"""Merge mounted registries into a base registry.

For each ledger entry the mounted registry is first resolved against its own
ledger (recursively), then its path definitions are rewritten under the mount
path and inserted into the base. Insertion is first-wins for every definition
kind; duplicates are dropped silently.

Composition is best-effort: malformed entries and mount cycles are logged and
skipped, never raised.
"""
import copy
import logging
from typing import Any, List, Optional, Tuple

from .definitions import Definition, PathDefinition
from .mounts import MountLedger
from .schemas import openapi_path, rule_variables

logger = logging.getLogger(__name__)


def join_mount_path(mount_path: str, path: str) -> str:
    """Join a normalized mount path and a sub-path with exactly one slash."""
    stripped = path[1:] if path.startswith('/') else path
    if mount_path == '/':
        return '/' + stripped
    return f'{mount_path}/{stripped}'


def mount_definition(definition: PathDefinition, mount_path: str) -> PathDefinition:
    """Move a path definition under mount_path.

    Variables in the mount prefix (``/orgs/<int:org_id>``) are written in OpenAPI
    form and documented as path parameters ahead of the operation's own.
    """
    moved = definition.with_path(join_mount_path(openapi_path(mount_path), definition.path))
    parameters = moved.operation.get('parameters', [])
    declared = {p.get('name') for p in parameters if p.get('in') == 'path'}
    inherited = [
        {'name': name, 'in': 'path', 'required': True, 'schema': schema}
        for name, schema in rule_variables(mount_path) if name not in declared
    ]
    if inherited:
        moved.operation['parameters'] = inherited + parameters
    return moved


def _definitions_of(registry: Any) -> Optional[List[Definition]]:
    definitions = getattr(registry, 'definitions', None)
    if not isinstance(definitions, list):
        return None
    return definitions


def _fold(target: List[Definition], ledger: Any, stack: Tuple[int, ...]) -> int:
    seen = {d.key for d in target}
    added = 0
    for entry in ledger.entries():
        sub = entry.registry
        if sub is None:
            continue
        if _definitions_of(sub) is None:
            logger.warning('Skipping mount at %s: registry has no definitions collection', entry.mount_path)
            continue
        if id(sub) in stack:
            logger.warning('Skipping mount at %s: registry is mounted inside itself', entry.mount_path)
            continue
        for definition in resolve(sub, stack):
            if isinstance(definition, PathDefinition) and entry.mount_path != '/':
                definition = mount_definition(definition, entry.mount_path)
            if definition.key in seen:
                logger.debug('Dropping duplicate %s from mount at %s', definition.key, entry.mount_path)
                continue
            seen.add(definition.key)
            target.append(definition)
            added += 1
    return added


def resolve(registry: Any, _stack: Tuple[int, ...] = ()) -> List[Definition]:
    """Return deep copies of registry's definitions with its nested mounts folded in.

    Nothing is mutated: the registry and the registries mounted under it keep
    their own (unprefixed) definitions.
    """
    merged = [copy.deepcopy(d) for d in _definitions_of(registry) or []]
    ledger = getattr(registry, 'mounts', None)
    if isinstance(ledger, MountLedger):
        _fold(merged, ledger, _stack + (id(registry),))
    return merged


def registries_under(registry: Any) -> List[Any]:
    """Return registry followed by every registry mounted beneath it, depth first."""
    found: List[Any] = []
    pending = [registry]
    while pending:
        current = pending.pop()
        if current is None or any(current is r for r in found):
            continue
        found.append(current)
        ledger = getattr(current, 'mounts', None)
        if isinstance(ledger, MountLedger):
            pending.extend(reversed([e.registry for e in ledger.entries()]))
    return found


def compose(base: Any, ledger: Optional[MountLedger] = None) -> Any:
    """Merge every registry recorded in ledger into base, in place.

    ``ledger`` defaults to the base registry's own mounts. Returns ``base``.
    """
    if ledger is None:
        ledger = getattr(base, 'mounts', None)
    definitions = _definitions_of(base)
    if ledger is None or definitions is None:
        logger.warning('Nothing to compose: base registry has no definitions collection or ledger')
        return base
    added = _fold(definitions, ledger, (id(base),))
    logger.debug('Composed %d mounted definitions from %d mounts', added, len(ledger.entries()))
    return base


__all__ = ['compose', 'resolve', 'join_mount_path', 'mount_definition', 'registries_under']
