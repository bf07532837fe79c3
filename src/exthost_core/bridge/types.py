"""Host-side interfaces the bridge forwards to."""

from collections.abc import Callable
from enum import Enum
from typing import Any, Protocol, runtime_checkable

MessageListener = Callable[[Any], Any]
DataListener = Callable[[Any, Any], Any]
RuntimeCallback = Callable[[Any], Any]


@runtime_checkable
class ExtensionInstance(Protocol):
    """Live extension instance returned by a descriptor's loader.

    Delivery and ordering of messages are the instance's concern; the
    bridge only forwards calls.
    """

    def load_instance(self) -> None: ...

    def post_message(self, msg: Any) -> Any: ...

    def send_sync_message(self, msg: Any) -> Any: ...

    def set_message_listener(self, fn: MessageListener | None) -> Any: ...

    def post_data(self, msg: Any, chunk: Any) -> Any: ...

    def send_sync_data(self, msg: Any, chunk: Any) -> Any: ...

    def set_data_listener(self, fn: DataListener | None) -> Any: ...

    def receive_chunk_data(self, chunk_id: Any, chunk_type: Any) -> Any: ...


class RuntimeMessageKind(str, Enum):
    """Control messages recognized on the runtime channel."""

    EXIT = "tizen://exit"
