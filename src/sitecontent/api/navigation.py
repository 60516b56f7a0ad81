"""Navigation and route manifest endpoints."""

from aiohttp import web

from sitecontent.api.errors import error_response, unknown_section
from sitecontent.app_keys import config_key, index_key, store_key
from sitecontent.core.navigation import NavigationBuilder
from sitecontent.core.routes import RouteManifest, enumerate_feed_routes, enumerate_routes
from sitecontent.errors import ContentError, DefinitionError


def create_navigation_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/navigation/{root}", get_navigation),
        web.get("/api/routes/{root}", get_routes),
    ]


async def get_navigation(request: web.Request) -> web.Response:
    root = request.match_info["root"]
    config = request.app[config_key]
    if root not in config.sections:
        return unknown_section(root)

    builder = NavigationBuilder(request.app[store_key])
    try:
        tree = builder.normalize(config.get_section(root), root)
    except (ContentError, DefinitionError) as e:
        return error_response(e, root)
    return web.json_response({"items": tree.to_dict()})


async def get_routes(request: web.Request) -> web.Response:
    root = request.match_info["root"]
    config = request.app[config_key]

    try:
        if root in config.sections:
            routes = enumerate_routes(config.get_section(root))
        elif root == config.feed.root:
            routes = enumerate_feed_routes(request.app[index_key], root)
        else:
            return unknown_section(root)
    except (ContentError, DefinitionError) as e:
        return error_response(e, root)
    return web.json_response(RouteManifest(routes=routes).to_dict())
