"""Dispatch of decoded client messages by their ``type`` field."""

from __future__ import annotations

import logging
from typing import Any, Callable, Awaitable, Optional

from novadefense.models.messages import GameMessage, parse_message

log = logging.getLogger(__name__)

# async (message, sender_uid) -> reply for the sender, or None
Handler = Callable[[GameMessage, int], Awaitable[Optional[dict[str, Any]]]]


class Router:
    """Maps message types to async handlers.

    Unknown types are ignored; a payload that does not fit the model of
    its type raises ``pydantic.ValidationError`` out of ``route``.
    """

    def __init__(self) -> None:
        self._routes: dict[str, Handler] = {}

    def register(self, msg_type: str, handler: Handler) -> None:
        if msg_type in self._routes:
            log.warning("Replacing handler for %s", msg_type)
        self._routes[msg_type] = handler

    @property
    def registered_types(self) -> list[str]:
        return sorted(self._routes)

    async def route(self, raw: dict[str, Any], sender_uid: int) -> Optional[dict[str, Any]]:
        message = parse_message(raw)
        handler = self._routes.get(message.type)
        if handler is None:
            log.debug("Ignoring %s from client %d, no handler", message.type, sender_uid)
            return None
        return await handler(message, sender_uid)
