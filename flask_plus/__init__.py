"""flask_plus: validated, self-documenting routes for Flask applications and blueprints."""
from .composition import compose, join_mount_path, registries_under, resolve
from .config import ApiOptions, OpenAPIConfig
from .definitions import AnonymousDefinition, NamedDefinition, PathDefinition
from .dispatch import classify_call
from .docs import serve_docs
from .enhance import BlueprintPlus, EnhancedTarget, FlaskPlus, blueprint_plus, flask_plus
from .errors import ConfigurationError, FlaskPlusError, register_error_handlers
from .mounts import MountEntry, MountLedger
from .options import EndpointOptions
from .registry import Registry
from .validation import ParsedRequest

__all__ = [
    'flask_plus',
    'blueprint_plus',
    'FlaskPlus',
    'BlueprintPlus',
    'EnhancedTarget',
    'Registry',
    'ApiOptions',
    'OpenAPIConfig',
    'EndpointOptions',
    'ParsedRequest',
    'PathDefinition',
    'NamedDefinition',
    'AnonymousDefinition',
    'MountEntry',
    'MountLedger',
    'compose',
    'resolve',
    'join_mount_path',
    'registries_under',
    'classify_call',
    'serve_docs',
    'register_error_handlers',
    'ConfigurationError',
    'FlaskPlusError',
]
