"""Recording host runtime and extension instance for loader tests."""

from collections.abc import Mapping
from typing import Any

from exthost_core.extensions import ExtensionDescriptor


class RecordingInstance:
    """Extension instance that records every primitive call.

    Example:
        instance = RecordingInstance(sync_reply="pong")
        descriptor = ExtensionDescriptor("echo", code=..., loader=lambda: instance)
    """

    def __init__(self, sync_reply: Any = None, fail_on_load: Exception | None = None):
        self.calls: list[tuple[Any, ...]] = []
        self.sync_reply = sync_reply
        self.fail_on_load = fail_on_load
        self.message_listener: Any = None
        self.data_listener: Any = None

    def load_instance(self) -> None:
        self.calls.append(("load_instance",))
        if self.fail_on_load is not None:
            raise self.fail_on_load

    def post_message(self, msg: Any) -> None:
        self.calls.append(("post_message", msg))

    def send_sync_message(self, msg: Any) -> Any:
        self.calls.append(("send_sync_message", msg))
        return self.sync_reply

    def set_message_listener(self, fn: Any) -> None:
        self.calls.append(("set_message_listener", fn))
        self.message_listener = fn

    def post_data(self, msg: Any, chunk: Any) -> None:
        self.calls.append(("post_data", msg, chunk))

    def send_sync_data(self, msg: Any, chunk: Any) -> Any:
        self.calls.append(("send_sync_data", msg, chunk))
        return self.sync_reply

    def set_data_listener(self, fn: Any) -> None:
        self.calls.append(("set_data_listener", fn))
        self.data_listener = fn

    def receive_chunk_data(self, chunk_id: Any, chunk_type: Any) -> Any:
        self.calls.append(("receive_chunk_data", chunk_id, chunk_type))
        return b"chunk"

    def emit(self, msg: Any) -> Any:
        """Deliver a message to the registered listener, as the host loop would."""
        return self.message_listener(msg)


class RecordingHost:
    """HostRuntime serving a fixed list of descriptors and recording calls."""

    def __init__(
        self,
        descriptors: list[ExtensionDescriptor] | None = None,
        fail_initialize: Exception | None = None,
        fail_enumeration: Exception | None = None,
    ):
        self.descriptors = list(descriptors or [])
        self.fail_initialize = fail_initialize
        self.fail_enumeration = fail_enumeration
        self.calls: list[str] = []
        self.initialized_with: dict[str, str] | None = None
        self.variable_updates: list[dict[str, str]] = []

    def add(self, descriptor: ExtensionDescriptor) -> ExtensionDescriptor:
        self.descriptors.append(descriptor)
        return descriptor

    def initialize(self, runtime_variables: Mapping[str, str]) -> None:
        self.calls.append("initialize")
        self.initialized_with = dict(runtime_variables)
        if self.fail_initialize is not None:
            raise self.fail_initialize

    def get_extensions(self) -> list[ExtensionDescriptor]:
        self.calls.append("get_extensions")
        if self.fail_enumeration is not None:
            raise self.fail_enumeration
        return list(self.descriptors)

    def update_runtime_variables(self, runtime_variables: Mapping[str, str]) -> None:
        self.calls.append("update_runtime_variables")
        self.variable_updates.append(dict(runtime_variables))
