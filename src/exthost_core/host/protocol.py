"""Contract between the extension loader and the host runtime."""

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from exthost_core.extensions.descriptor import ExtensionDescriptor


@runtime_checkable
class HostRuntime(Protocol):
    """Host runtime as seen by ExtensionLoader.

    ``initialize`` and ``get_extensions`` are each called once, in that
    order, when the loader starts. ``update_runtime_variables`` may be
    called any number of times afterwards (e.g. per service request).
    """

    def initialize(self, runtime_variables: Mapping[str, str]) -> None: ...

    def get_extensions(self) -> Sequence["ExtensionDescriptor"]: ...

    def update_runtime_variables(self, runtime_variables: Mapping[str, str]) -> None: ...
