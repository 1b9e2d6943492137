"""Polymorphic verb registration and mount recording.

A verb call is classified into exactly one call shape, in priority order:

  OptionsFirst      api.post({'path': '/x', 'body': S}, handler, ...)
  PathWithOptions   api.post('/x', {'body': S}, handler, ...)
  Passthrough       anything else, e.g. api.post('/x', handler) or
                    api.get(['/a', '/b'], handler); forwarded unchanged

For the first two shapes the registry's endpoint factory builds a validation
middleware, which is registered immediately before the caller's handlers.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from .errors import ConfigurationError
from .mounts import MountLedger
from .options import EndpointOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OptionsFirst:
    options: Any
    handlers: Tuple[Any, ...]


@dataclass(frozen=True)
class PathWithOptions:
    path: str
    options: Any
    handlers: Tuple[Any, ...]


@dataclass(frozen=True)
class Passthrough:
    args: Tuple[Any, ...]
    kwargs: Dict[str, Any] = field(default_factory=dict)


CallShape = Union[OptionsFirst, PathWithOptions, Passthrough]


def is_options_object(value: Any) -> bool:
    """True for a plain keyed object; path specifiers (str, patterns, sequences) never qualify."""
    if isinstance(value, (str, bytes, list, tuple, re.Pattern)):
        return False
    return isinstance(value, (Mapping, EndpointOptions))


def classify_call(args: Tuple[Any, ...]) -> CallShape:
    if len(args) >= 2 and is_options_object(args[0]):
        return OptionsFirst(args[0], tuple(args[1:]))
    if len(args) >= 3 and isinstance(args[0], str) and is_options_object(args[1]):
        return PathWithOptions(args[0], args[1], tuple(args[2:]))
    return Passthrough(tuple(args))


def dispatch(
    method: str,
    args: Tuple[Any, ...],
    kwargs: Dict[str, Any],
    create_endpoint: Callable[..., Any],
    register: Callable[..., Any],
):
    """Classify a verb call and perform exactly one registration through ``register``."""
    shape = classify_call(args)
    if isinstance(shape, OptionsFirst):
        options = EndpointOptions.coerce(shape.options)
        if not options.path:
            raise ConfigurationError(f'Path is required when using options as first argument for {method}')
        middleware = create_endpoint(method, options.path, options)
        return register(options.path, middleware, *shape.handlers, **kwargs)
    if isinstance(shape, PathWithOptions):
        options = EndpointOptions.coerce(shape.options)
        middleware = create_endpoint(method, shape.path, options)
        return register(shape.path, middleware, *shape.handlers, **kwargs)
    return register(*shape.args, **kwargs)


def enhanced_registry(value: Any) -> Optional[Any]:
    """Return the registry of an enhanced target, or None for anything else."""
    from .enhance import EnhancedTarget

    if isinstance(value, EnhancedTarget) and value.registry is not None:
        return value.registry
    return None


def record_mount(ledger: MountLedger, sub: Any, mount_path: Optional[str]) -> bool:
    registry = enhanced_registry(sub)
    if registry is None:
        return False
    entry = ledger.record(mount_path or '/', registry)
    logger.info('Registering %s at path: %s', getattr(sub, 'name', 'router'), entry.mount_path)
    return True


__all__ = [
    'OptionsFirst',
    'PathWithOptions',
    'Passthrough',
    'CallShape',
    'classify_call',
    'dispatch',
    'is_options_object',
    'enhanced_registry',
    'record_mount',
]
