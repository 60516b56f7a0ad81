"""Page props endpoints.

Resolves page props on every request; content is never cached, so edits in
the content directory show up on the next request.
"""

from aiohttp import web

from sitecontent.api.errors import error_response, unknown_section
from sitecontent.app_keys import assembler_key, config_key, index_key
from sitecontent.core.props import build_app_context
from sitecontent.errors import ContentError, DefinitionError


def create_props_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/props/{root}/{path:.+}", get_props),
        web.get("/api/feed", get_feed),
    ]


async def get_props(request: web.Request) -> web.Response:
    root = request.match_info["root"]
    path = request.match_info["path"]
    config = request.app[config_key]
    index = request.app[index_key]
    assembler = request.app[assembler_key]
    segments = path.strip("/").split("/")

    try:
        app = build_app_context(index, config.feed.root)
        if root in config.sections:
            props = assembler.assemble(config.get_section(root), root, segments, app)
        elif root == config.feed.root:
            props = assembler.assemble_feed_page(
                index, root, segments, config.feed.menu_size, app
            )
        else:
            return unknown_section(root)
    except (ContentError, DefinitionError) as e:
        return error_response(e, f"{root}/{path}")

    return web.json_response(props.to_dict())


async def get_feed(request: web.Request) -> web.Response:
    config = request.app[config_key]
    index = request.app[index_key]

    try:
        groups = index.group_by_year(config.feed.root, config.feed.menu_size)
    except ContentError as e:
        return error_response(e, config.feed.root)

    return web.json_response(
        {
            "root": config.feed.root,
            "years": [
                {"year": year, "entries": [entry.to_dict() for entry in entries]}
                for year, entries in groups.items()
            ],
        }
    )
