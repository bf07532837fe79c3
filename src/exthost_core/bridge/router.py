"""Shared runtime-message channel.

Runtime messages never reach extension instances. Recognized control
kinds are handled here; everything else is handed verbatim to the
application-lifecycle handler.
"""

import logging
from collections.abc import Callable
from typing import Any

from .types import RuntimeCallback, RuntimeMessageKind

logger = logging.getLogger(__name__)

RuntimeHandler = Callable[[str, Any, RuntimeCallback | None], Any]


class RuntimeMessageRouter:
    """Routes runtime messages from every extension bridge."""

    def __init__(
        self,
        on_terminate: Callable[[], Any],
        handler: RuntimeHandler | None = None,
    ):
        """Initialize router.

        Args:
            on_terminate: Called once per EXIT message
            handler: Pass-through hook for all other messages
        """
        self._on_terminate = on_terminate
        self._handler = handler

    def set_handler(self, handler: RuntimeHandler | None) -> None:
        """Replace the pass-through handler."""
        self._handler = handler

    def route(
        self,
        message_type: str,
        data: Any = None,
        callback: RuntimeCallback | None = None,
    ) -> Any:
        """Dispatch one runtime message.

        Returns:
            The handler's return value for pass-through messages, else None
        """
        if message_type == RuntimeMessageKind.EXIT.value:
            logger.debug("Runtime exit requested")
            self._on_terminate()
            return None

        if self._handler is None:
            logger.debug("No runtime handler for %r, dropping", message_type)
            return None
        return self._handler(message_type, data, callback)
