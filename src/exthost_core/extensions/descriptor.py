"""Extension descriptors as enumerated by the host."""

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from exthost_core.bridge.types import ExtensionInstance
from exthost_core.types import CodeKind, LoadState

_REFERENCE_RE = re.compile(r"^[A-Za-z_][\w.]*:[A-Za-z_][\w.]*$")

ExtensionCode = str | Callable[..., Any]


class NullInstance:
    """Instance for extensions that have no host-side counterpart.

    Every primitive accepts its arguments and returns None.
    """

    def load_instance(self) -> None:
        return None

    def post_message(self, msg: Any) -> None:
        return None

    def send_sync_message(self, msg: Any) -> None:
        return None

    def set_message_listener(self, fn: Any) -> None:
        return None

    def post_data(self, msg: Any, chunk: Any) -> None:
        return None

    def send_sync_data(self, msg: Any, chunk: Any) -> None:
        return None

    def set_data_listener(self, fn: Any) -> None:
        return None

    def receive_chunk_data(self, chunk_id: Any, chunk_type: Any) -> None:
        return None


@dataclass
class ExtensionDescriptor:
    """One extension as enumerated by the host.

    Attributes:
        name: Dotted namespace path, unique within the registry
        code: API source; a callable ``(bridge, exports) -> mapping | None``,
            an import reference ``"package.module:function"`` or Python
            source text
        entry_points: Additional dotted paths the extension populates
        use_trampoline: Defer activation to first access
        loader: Returns the live host instance
        code_kind: Overrides detection of the ``code`` form
        loaded: Set once activation starts, never reset
        state: Current activation state
        error: Why activation failed, when state is FAILED
    """

    name: str
    code: ExtensionCode = ""
    entry_points: list[str] = field(default_factory=list)
    use_trampoline: bool = False
    loader: Callable[[], ExtensionInstance] = NullInstance
    code_kind: CodeKind | None = None
    loaded: bool = False
    state: LoadState = LoadState.UNLOADED
    error: Exception | None = None

    @property
    def paths(self) -> list[str]:
        """Entry points in declared order, then the extension's own name."""
        return [*self.entry_points, self.name]

    @property
    def kind(self) -> CodeKind:
        if self.code_kind is not None:
            return self.code_kind
        if callable(self.code):
            return CodeKind.CALLABLE
        if _REFERENCE_RE.match(self.code.strip()):
            return CodeKind.REFERENCE
        return CodeKind.SOURCE
