"""Bearer-token enforcement for endpoints that declare a security requirement.

An endpoint is protected when its ``security`` option names a scheme
registered as ``{"type": "http", "scheme": "bearer"}``, either on the
registry that owns the endpoint or anywhere in the application's composed
registry. Schemes are looked up per request, so a scheme registered after
the route was added still applies. Token verification is delegated to
flask-jwt-extended.
"""
from typing import Any, Callable, Iterable, Mapping, Optional, Set
from flask import current_app
from flask_jwt_extended import verify_jwt_in_request

# key under app.extensions holding the application's Registry
EXTENSION_KEY = 'flask-plus'


def is_bearer_scheme(scheme: Any) -> bool:
    return (
        isinstance(scheme, Mapping)
        and scheme.get('type') == 'http'
        and str(scheme.get('scheme', '')).lower() == 'bearer'
    )


def requires_bearer(security: Optional[Iterable[Mapping[str, Any]]], bearer_schemes: Set[str]) -> bool:
    if not security:
        return False
    return any(name in bearer_schemes for requirement in security for name in requirement)


def enforced_bearer_schemes(registry: Any) -> Set[str]:
    schemes = set(registry.bearer_schemes())
    app_registry = current_app.extensions.get(EXTENSION_KEY)
    if app_registry is not None:
        schemes |= app_registry.bearer_schemes(transitive=True)
    return schemes


def bearer_check(security: Optional[Iterable[Mapping[str, Any]]], registry: Any) -> Optional[Callable[[], bool]]:
    """Return a request-time predicate telling whether a bearer token is required."""
    if not security:
        return None
    requirements = [dict(r) for r in security]

    def check() -> bool:
        return requires_bearer(requirements, enforced_bearer_schemes(registry))

    return check


def verify_bearer() -> None:
    verify_jwt_in_request()


__all__ = ['EXTENSION_KEY', 'bearer_check', 'enforced_bearer_schemes', 'is_bearer_scheme', 'requires_bearer', 'verify_bearer']
