"""Slot variants held by a Namespace for each attribute.

A slot decides what a read returns and whether the attribute may be
reassigned or removed:

- ValueSlot: plain value, writable and configurable.
- TrampolineSlot: unresolved lazy cell; the first read runs its resolver.
  Configurable, so activation can remove it. Members installed below it
  before it resolves wait in its ``children`` container.
- ForwardingSlot: resolved read-only accessor onto the protected copy.
  Neither writable nor configurable once installed.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar

from exthost_core.types import Visibility


class Slot:
    """Base class for namespace slots."""

    writable: ClassVar[bool] = True
    configurable: ClassVar[bool] = True
    enumerable: ClassVar[bool] = True
    visibility: ClassVar[Visibility] = Visibility.PUBLIC

    def get(self) -> Any:
        raise NotImplementedError


@dataclass
class ValueSlot(Slot):
    """Holds a plain value."""

    value: Any

    def get(self) -> Any:
        return self.value


@dataclass
class TrampolineSlot(Slot):
    """Lazy accessor that resolves its extension on first read."""

    resolver: Callable[[], Any]
    extension: str = ""
    children: Any = None

    writable: ClassVar[bool] = False
    visibility: ClassVar[Visibility] = Visibility.LAZY

    def get(self) -> Any:
        return self.resolver()


@dataclass
class ForwardingSlot(Slot):
    """Read-only accessor returning the value held on the protected root."""

    getter: Callable[[], Any]
    extension: str = ""

    writable: ClassVar[bool] = False
    configurable: ClassVar[bool] = False
    visibility: ClassVar[Visibility] = Visibility.PUBLIC_READONLY

    def get(self) -> Any:
        return self.getter()
