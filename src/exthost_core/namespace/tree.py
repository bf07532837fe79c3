"""Namespace container with slot-backed attributes."""

from collections.abc import Iterator
from typing import Any

from exthost_core.errors import create_error

from .slots import Slot, ValueSlot

_INTERNAL_ATTRS = ("_slots", "_path", "_internal")


class Namespace:
    """Attribute container forming one node of a namespace tree.

    Reads go through the slot stored under the attribute name, so a
    lazy slot resolves transparently on ``ns.attr``. Writes replace the
    slot with a ValueSlot unless the current slot is read-only; deletes
    fail on non-configurable slots.

    The protected root and everything created under it is marked
    internal; the flag only affects reported visibility.
    """

    __slots__ = _INTERNAL_ATTRS

    def __init__(self, path: str = "", internal: bool = False):
        object.__setattr__(self, "_slots", {})
        object.__setattr__(self, "_path", path)
        object.__setattr__(self, "_internal", internal)

    def __getattr__(self, name: str) -> Any:
        if name in _INTERNAL_ATTRS:
            raise AttributeError(name)
        slot = self._slots.get(name)
        if slot is None:
            raise AttributeError(f"Namespace '{self._path or '<root>'}' has no member '{name}'")
        return slot.get()

    def __setattr__(self, name: str, value: Any) -> None:
        slot = self._slots.get(name)
        if slot is not None and not slot.writable:
            raise create_error("NAMESPACE_READONLY", path=self._child_path(name))
        self._slots[name] = ValueSlot(value)

    def __delattr__(self, name: str) -> None:
        slot = self._slots.get(name)
        if slot is None:
            raise AttributeError(name)
        if not slot.configurable:
            raise create_error("NAMESPACE_READONLY", path=self._child_path(name))
        del self._slots[name]

    def __contains__(self, name: object) -> bool:
        return name in self._slots

    def __iter__(self) -> Iterator[str]:
        return iter([name for name, slot in self._slots.items() if slot.enumerable])

    def __dir__(self) -> list[str]:
        return list(self)

    def __repr__(self) -> str:
        return f"Namespace({self._path!r}, members={list(self)!r})"

    def _child_path(self, name: str) -> str:
        return f"{self._path}.{name}" if self._path else name

    def _get_slot(self, name: str) -> Slot | None:
        return self._slots.get(name)

    def _define_slot(self, name: str, slot: Slot) -> None:
        current = self._slots.get(name)
        if current is not None and not current.configurable:
            raise create_error("NAMESPACE_READONLY", path=self._child_path(name))
        self._slots[name] = slot

    def _remove_slot(self, name: str) -> Slot | None:
        current = self._slots.get(name)
        if current is None:
            return None
        if not current.configurable:
            raise create_error("NAMESPACE_READONLY", path=self._child_path(name))
        return self._slots.pop(name)

    def _new_child(self, name: str) -> "Namespace":
        return Namespace(self._child_path(name), internal=self._internal)


class Exports(Namespace):
    """Container an extension's code writes its API into.

    Besides attribute writes, ``publish`` records a value for one of the
    extension's additional entry points (e.g. ``tizen.AddressBook``); the
    activator installs those values next to the extension's own namespace.
    """

    __slots__ = ("_published",)

    def __init__(self, path: str = ""):
        super().__init__(path)
        object.__setattr__(self, "_published", {})

    def __getattr__(self, name: str) -> Any:
        if name == "_published":
            raise AttributeError(name)
        return super().__getattr__(name)

    def publish(self, path: str, value: Any) -> None:
        """Record the value for an entry point path."""
        self._published[path] = value

    @property
    def published(self) -> dict[str, Any]:
        return dict(self._published)
