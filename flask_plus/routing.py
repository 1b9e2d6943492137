"""Register handler chains on a Flask application or blueprint.

Flask routes map one rule to one view function. A registration here takes any
number of callables and folds them into a single view: every callable but the
last behaves like a ``before_request`` hook (returning None continues, any
other value becomes the response) and the last one is the route handler.
"""
import functools
import re
from typing import Any, Callable, List, Mapping, Optional, Set

from .errors import ConfigurationError
from .options import EndpointOptions


def chain_handlers(handlers: List[Callable[..., Any]]) -> Callable[..., Any]:
    *middleware, handler = handlers

    @functools.wraps(handler)
    def view(**view_args):
        for fn in middleware:
            rv = fn(**view_args)
            if rv is not None:
                return rv
        return handler(**view_args)

    return view


class RouteRegistrar:
    def __init__(self, target: Any):
        self.target = target
        self._endpoints: Set[str] = set()

    def register(self, method: str, rule: Any, *handlers: Callable[..., Any], endpoint: Optional[str] = None, **options: Any):
        """Add ``rule`` (or each rule of a list) for ``method`` with ``handlers`` chained.

        Called with no handlers, returns a decorator registering the decorated
        function and returning it unchanged.
        """
        if any(isinstance(v, (Mapping, EndpointOptions)) for v in (rule,) + handlers):
            raise ConfigurationError(
                f'Route options for {method} need an explicit handler, '
                f'e.g. api.{method}(path, options, handler); they cannot be used as a decorator'
            )
        if not handlers:
            def decorator(fn):
                self.register(method, rule, fn, endpoint=endpoint, **options)
                return fn
            return decorator

        rules = list(rule) if isinstance(rule, (list, tuple)) else [rule]
        for r in rules:
            if isinstance(r, re.Pattern):
                raise TypeError('Flask rules are strings; regular expression paths are not supported')
            if not isinstance(r, str):
                raise TypeError(f'Route rule must be a string, got {type(r).__name__}')
        for h in handlers:
            if not callable(h):
                raise TypeError(f'Route handler must be callable, got {type(h).__name__}')

        view = chain_handlers(list(handlers))
        name = endpoint or self._allocate_endpoint(getattr(handlers[-1], '__name__', 'view'), method)
        for r in rules:
            self.target.add_url_rule(r, name, view, methods=[method.upper()], **options)
        return None

    def _taken(self, name: str) -> bool:
        return name in self._endpoints or name in getattr(self.target, 'view_functions', {})

    def _allocate_endpoint(self, base: str, method: str) -> str:
        base = base.replace('.', '_')
        candidate = base
        if self._taken(candidate):
            candidate = f'{base}_{method}'
        n = 2
        while self._taken(candidate):
            candidate = f'{base}_{method}_{n}'
            n += 1
        self._endpoints.add(candidate)
        return candidate


__all__ = ['RouteRegistrar', 'chain_handlers']
