"""Per-extension message bridge."""

from types import SimpleNamespace
from typing import TYPE_CHECKING, Any

from .router import RuntimeMessageRouter
from .types import (
    DataListener,
    ExtensionInstance,
    MessageListener,
    RuntimeCallback,
    RuntimeMessageKind,
)

if TYPE_CHECKING:
    from exthost_core.logging import BridgeLogger


class ExtensionBridge:
    """Fixed set of communication primitives handed to extension code.

    Instance primitives forward directly to the host-provided instance;
    runtime primitives go to the shared RuntimeMessageRouter. Nothing is
    buffered, retried or reordered.

    ``internal.send_sync_message`` is the same primitive as
    ``send_sync_message``; extension sources written against the
    ``extension.internal`` convention keep working.
    """

    def __init__(
        self,
        name: str,
        instance: ExtensionInstance,
        router: RuntimeMessageRouter,
        logger: "BridgeLogger | None" = None,
    ):
        self.name = name
        self._instance = instance
        self._router = router
        self._logger = logger
        self.internal = SimpleNamespace(send_sync_message=self.send_sync_message)

    # Instance primitives

    def post_message(self, msg: Any) -> Any:
        return self._instance.post_message(msg)

    def send_sync_message(self, msg: Any) -> Any:
        return self._instance.send_sync_message(msg)

    def set_message_listener(self, fn: MessageListener | None) -> Any:
        return self._instance.set_message_listener(fn)

    def post_data(self, msg: Any, chunk: Any) -> Any:
        return self._instance.post_data(msg, chunk)

    def send_sync_data(self, msg: Any, chunk: Any) -> Any:
        return self._instance.send_sync_data(msg, chunk)

    def set_data_listener(self, fn: DataListener | None) -> Any:
        return self._instance.set_data_listener(fn)

    def receive_chunk_data(self, chunk_id: Any, chunk_type: Any) -> Any:
        return self._instance.receive_chunk_data(chunk_id, chunk_type)

    # Runtime primitives

    def send_runtime_message(self, message_type: str, data: Any = None) -> Any:
        return self._route(message_type, data)

    def send_runtime_sync_message(self, message_type: str, data: Any = None) -> Any:
        return self._route(message_type, data)

    def send_runtime_async_message(
        self,
        message_type: str,
        data: Any = None,
        callback: RuntimeCallback | None = None,
    ) -> Any:
        return self._route(message_type, data, callback)

    def _route(self, message_type: str, data: Any, callback: RuntimeCallback | None = None) -> Any:
        if self._logger:
            if message_type == RuntimeMessageKind.EXIT.value:
                self._logger.terminate_requested(message_type)
            else:
                self._logger.runtime_message(message_type)
        return self._router.route(message_type, data, callback)

    def __repr__(self) -> str:
        return f"ExtensionBridge(name={self.name!r})"
