"""Application keys for type-safe app configuration access."""

from aiohttp import web

from sitecontent.config import Config
from sitecontent.core.chronology import ChronologicalIndex
from sitecontent.core.props import PropsAssembler
from sitecontent.core.store import ContentStore

config_key = web.AppKey("config", Config)
store_key = web.AppKey("store", ContentStore)
index_key = web.AppKey("index", ChronologicalIndex)
assembler_key = web.AppKey("assembler", PropsAssembler)
