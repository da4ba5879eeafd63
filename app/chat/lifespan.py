"""
ASGI lifespan handler for the presence registry.

Uvicorn sends ``lifespan.startup`` before serving and ``lifespan.shutdown``
when stopping. The registry itself is built in ChatConfig.ready(); shutdown
clears it (and its Redis mirror entries) so no session outlives the
process.
"""

import logging

from chat.presence import get_presence_registry

logger = logging.getLogger(__name__)


class PresenceLifespan:
    """ASGI app for the ``lifespan`` scope type."""

    async def __call__(self, scope, receive, send):
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                logger.info("Presence registry ready")
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                get_presence_registry().clear()
                await send({"type": "lifespan.shutdown.complete"})
                return
