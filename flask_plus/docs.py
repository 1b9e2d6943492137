"""HTTP routes exposing the generated document."""
from typing import Optional

from .config import DEFAULT_DOCS_PATH, DEFAULT_SPEC_PATH, config_value
from .enhance import FlaskPlus

REDOC_PAGE = (
    "<!DOCTYPE html><html><head><title>{title}</title>"
    "<link rel=\"stylesheet\" href=\"https://cdn.jsdelivr.net/npm/redoc@next/bundles/redoc.standalone.css\" />"
    "</head><body><redoc spec-url='{spec_url}'></redoc>"
    "<script src='https://cdn.jsdelivr.net/npm/redoc@next/bundles/redoc.standalone.js'></script>"
    "</body></html>"
)


def serve_docs(api: FlaskPlus, spec_path: Optional[str] = None, docs_path: Optional[str] = None) -> FlaskPlus:
    """Add ``GET /openapi.json`` and a Redoc ``GET /docs`` page to the application."""
    app = api.target
    registry = api.registry
    spec_path = spec_path or config_value('OPENAPI_SPEC_PATH', app.config, DEFAULT_SPEC_PATH)
    docs_path = docs_path or config_value('OPENAPI_DOCS_PATH', app.config, DEFAULT_DOCS_PATH)

    def openapi_spec():
        # generated per request so blueprints mounted after setup are included
        return registry.generate_openapi_document()

    def docs_index():
        return REDOC_PAGE.format(title=registry.info.get('title', 'API Docs'), spec_url=spec_path)

    app.add_url_rule(spec_path, 'openapi_spec', openapi_spec, methods=['GET'])
    app.add_url_rule(docs_path, 'docs_index', docs_index, methods=['GET'])
    return api


__all__ = ['serve_docs']
