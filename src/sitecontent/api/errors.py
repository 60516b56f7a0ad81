"""Error responses shared by API endpoints."""

from aiohttp import web

from sitecontent.errors import ContentError, DefinitionError, NotFoundError


def error_response(error: ContentError | DefinitionError, path: str) -> web.Response:
    """Map a resolution error to a JSON error response."""
    if isinstance(error, NotFoundError):
        return web.json_response({"error": "Page not found", "path": path}, status=404)
    return web.json_response(
        {"error": str(error), "path": getattr(error, "path", path)},
        status=500,
    )


def unknown_section(root: str) -> web.Response:
    return web.json_response({"error": "Section not found", "path": root}, status=404)
