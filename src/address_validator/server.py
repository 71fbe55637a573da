from __future__ import annotations

import asyncio
import logging

from fastmcp import FastMCP

from address_validator.app.container import Container, build_container
from address_validator.app.logger import configure_logging
from address_validator.infra.redis_cache import RedisCache
from address_validator.tools.address_tools import register_address_tools
from address_validator.web.routes import register_http_routes

log = logging.getLogger(__name__)


def create_server(container: Container) -> FastMCP:
    mcp = FastMCP("address-validator")

    try:
        register_address_tools(mcp, container)
        register_http_routes(mcp, container)
        log.info("Address tools registered successfully")
    except Exception as e:
        log.error("Failed to register address tools: %s", e, exc_info=True)
        raise

    return mcp


async def serve(container: Container) -> None:
    mcp = create_server(container)

    try:
        if isinstance(container.cache, RedisCache):
            # fail fast on an unreachable cache
            await container.cache.ping()
            log.info("Connected to Redis at %s:%s", container.settings.redis_host, container.settings.redis_port)

        log.info("Server starting on %s:%s", container.settings.host, container.settings.port)
        await mcp.run_async(
            transport="http",
            host=container.settings.host,
            port=container.settings.port,
            path="/mcp",
        )
    finally:
        await container.aclose()
        log.info("Resources closed")


def main() -> None:
    container = build_container()
    configure_logging(container.settings.log_level)
    asyncio.run(serve(container))


if __name__ == "__main__":
    main()
