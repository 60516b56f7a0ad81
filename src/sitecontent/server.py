"""aiohttp preview server for Sitecontent.

Application factory and route registration. Serves resolved routes,
navigation and page props as JSON for front-end development.
"""

import logging

from aiohttp import web

from sitecontent.api.navigation import create_navigation_routes
from sitecontent.api.props import create_props_routes
from sitecontent.app_keys import assembler_key, config_key, index_key, store_key
from sitecontent.config import Config
from sitecontent.core.chronology import ChronologicalIndex
from sitecontent.core.navigation import NavigationBuilder
from sitecontent.core.props import PropsAssembler
from sitecontent.core.store import ContentStore

logger = logging.getLogger(__name__)


def create_app(config: Config) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration

    Returns:
        Configured aiohttp application
    """
    app = web.Application()

    store = ContentStore(config.content.source_dir)

    app[config_key] = config
    app[store_key] = store
    app[index_key] = ChronologicalIndex(store)
    app[assembler_key] = PropsAssembler(store, NavigationBuilder(store))

    app.router.add_routes(create_navigation_routes())
    app.router.add_routes(create_props_routes())

    logger.debug("Serving sections: %s", ", ".join(config.sections))
    return app


def run_server(config: Config) -> None:
    """Run the server."""
    app = create_app(config)
    web.run_app(app, host=config.server.host, port=config.server.port)
