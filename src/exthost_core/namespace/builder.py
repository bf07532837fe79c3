"""Dotted-path operations over namespace trees.

All helpers take a root Namespace and a dotted path such as
``"tizen.contact"``. Intermediate segments are always containers:
``create_namespace`` builds missing ones and never replaces an existing
value, so installing ``a.b`` and ``a.c`` in any order leaves both leaves
under the same ``a``.
"""

import logging
from collections.abc import Iterator
from typing import Any

from exthost_core.errors import create_error
from exthost_core.types import Visibility

from .slots import ForwardingSlot, Slot, TrampolineSlot, ValueSlot
from .tree import Exports, Namespace

logger = logging.getLogger(__name__)

_MISSING = object()


def split_path(dotted_name: str) -> list[str]:
    """Split a dotted path into segments.

    Raises:
        ValueError: If the path is empty or has an empty segment
    """
    segments = dotted_name.split(".")
    if not dotted_name or any(not segment for segment in segments):
        raise ValueError(f"Invalid namespace path: {dotted_name!r}")
    return segments


def _descend(node: Namespace, segment: str, create: bool) -> Namespace | None:
    """Step from ``node`` into the container at ``segment``.

    Lazy and forwarding slots are read (a trampoline on an intermediate
    segment activates its extension) and descended into when they yield a
    container.
    """
    slot = node._get_slot(segment)
    if slot is None:
        if not create:
            return None
        child = node._new_child(segment)
        node._define_slot(segment, ValueSlot(child))
        return child

    value = slot.get()
    if isinstance(value, Namespace):
        return value
    if not create:
        return None
    raise create_error(
        "NAMESPACE_CONFLICT",
        path=node._child_path(segment),
        segment=segment,
    )


def create_namespace(root: Namespace, dotted_name: str) -> None:
    """Create empty containers along ``dotted_name`` under ``root``.

    Eg. ``create_namespace(public, "tizen.contact")`` leaves
    ``public.tizen.contact`` as an empty Namespace unless something is
    already installed there. Existing slots at the leaf are kept as they
    are, lazy ones included, and are not read.

    Raises:
        ExtHostError(NAMESPACE_CONFLICT): If an intermediate segment holds
            a non-container value
    """
    segments = split_path(dotted_name)
    node = root
    for segment in segments[:-1]:
        node = _descend(node, segment, create=True)

    leaf = segments[-1]
    if node._get_slot(leaf) is None:
        node._define_slot(leaf, ValueSlot(node._new_child(leaf)))


def parent_of(
    root: Namespace, dotted_name: str, create: bool = False
) -> tuple[Namespace | None, str]:
    """Return the container holding the leaf of ``dotted_name`` and the leaf name."""
    segments = split_path(dotted_name)
    node: Namespace | None = root
    for segment in segments[:-1]:
        node = _descend(node, segment, create=create)
        if node is None:
            break
    return node, segments[-1]


def lookup(root: Namespace, dotted_name: str, default: Any = None) -> Any:
    """Read the value at ``dotted_name``, resolving lazy slots on the way.

    Returns ``default`` when any segment is missing.
    """
    value: Any = root
    for segment in split_path(dotted_name):
        if not isinstance(value, Namespace):
            value = getattr(value, segment, _MISSING)
        else:
            slot = value._get_slot(segment)
            value = _MISSING if slot is None else slot.get()
        if value is _MISSING:
            return default
    return value


def peek_parent(root: Namespace, dotted_name: str, through_lazy: bool = False) -> Namespace | None:
    """Return the container holding the leaf of ``dotted_name`` without resolving lazy slots.

    Intermediate trampolines count as missing unless ``through_lazy`` is
    set, in which case their pending children are searched.
    """
    node = root
    for segment in split_path(dotted_name)[:-1]:
        slot = node._get_slot(segment)
        if slot is None:
            return None
        if isinstance(slot, TrampolineSlot):
            if not through_lazy or slot.children is None:
                return None
            node = slot.children
            continue
        value = slot.get()
        if not isinstance(value, Namespace):
            return None
        node = value
    return node


def peek_slot(root: Namespace, dotted_name: str) -> Slot | None:
    """Return the slot at ``dotted_name`` without resolving lazy slots."""
    parent = peek_parent(root, dotted_name)
    if parent is None:
        return None
    return parent._get_slot(split_path(dotted_name)[-1])


def _container(slot: Slot | None) -> Namespace | None:
    if isinstance(slot, ValueSlot) and isinstance(slot.value, Namespace):
        return slot.value
    return None


def is_placeholder(node: Namespace) -> bool:
    """True for a container holding nothing but (nested) empty containers.

    Such trees are left behind by ``create_namespace``; an Exports
    container is never a placeholder, even when empty.
    """
    if isinstance(node, Exports):
        return False
    for slot in node._slots.values():
        child = _container(slot)
        if child is None or not is_placeholder(child):
            return False
    return True


def merge(target: Namespace, source: Namespace) -> list[str]:
    """Copy the slots of ``source`` that ``target`` does not define.

    Slots are moved as they are, lazy ones included. At every level a
    placeholder tree on ``target`` gives way to whatever ``source`` holds,
    and a placeholder from ``source`` adds nothing. When both hold real
    containers the two are merged recursively. A trampoline from
    ``source`` over a container on ``target`` takes that container as its
    pending children.

    Returns:
        Dotted names that were defined on both and kept from ``target``
    """
    clashes = []
    for name, slot in source._slots.items():
        current = target._slots.get(name)
        if current is None:
            target._define_slot(name, slot)
            continue

        ours, theirs = _container(current), _container(slot)
        if theirs is not None and (ours is theirs or is_placeholder(theirs)):
            continue
        if ours is not None and is_placeholder(ours):
            target._define_slot(name, slot)
        elif ours is not None and isinstance(slot, TrampolineSlot):
            if slot.children is None:
                slot.children = ours
            else:
                clashes.extend(f"{name}.{clash}" for clash in merge(slot.children, ours))
            target._define_slot(name, slot)
        elif ours is None or theirs is None:
            clashes.append(name)
        else:
            clashes.extend(f"{name}.{clash}" for clash in merge(ours, theirs))
    return clashes


def assign(root: Namespace, dotted_name: str, value: Any) -> None:
    """Set a plain value at ``dotted_name``, creating parent containers."""
    define(root, dotted_name, ValueSlot(value))


def define(root: Namespace, dotted_name: str, slot: Slot) -> None:
    """Install ``slot`` at ``dotted_name``, creating parent containers.

    Raises:
        ExtHostError(NAMESPACE_READONLY): If the current slot is not configurable
    """
    parent, leaf = parent_of(root, dotted_name, create=True)
    parent._define_slot(leaf, slot)
    logger.debug("Defined %s at %s", type(slot).__name__, dotted_name)


def define_lazy(root: Namespace, dotted_name: str, slot: TrampolineSlot) -> None:
    """Install a trampoline at ``dotted_name`` without reading lazy slots.

    An intermediate trampoline takes the rest of the path under its
    ``children``, and a container already at the leaf becomes the new
    trampoline's children, so nothing installed earlier is lost.
    """
    segments = split_path(dotted_name)
    node = root
    for segment in segments[:-1]:
        current = node._get_slot(segment)
        if isinstance(current, TrampolineSlot):
            if current.children is None:
                current.children = node._new_child(segment)
            node = current.children
        else:
            node = _descend(node, segment, create=True)

    leaf = segments[-1]
    existing = _container(node._get_slot(leaf))
    if existing is not None and slot.children is None:
        slot.children = existing
    node._define_slot(leaf, slot)
    logger.debug("Defined lazy slot at %s", dotted_name)


def remove(root: Namespace, dotted_name: str) -> Slot | None:
    """Remove and return the slot at ``dotted_name`` (None when absent).

    Raises:
        ExtHostError(NAMESPACE_READONLY): If the slot is not configurable
    """
    parent, leaf = parent_of(root, dotted_name)
    if parent is None:
        return None
    return parent._remove_slot(leaf)


def visibility(root: Namespace, dotted_name: str) -> Visibility | None:
    """Report how ``dotted_name`` is exposed on ``root``, or None when absent."""
    slot = peek_slot(root, dotted_name)
    if slot is None:
        return None
    if isinstance(slot, ValueSlot) and root._internal:
        return Visibility.INTERNAL
    return slot.visibility


def iter_slots(root: Namespace) -> Iterator[tuple[str, Slot]]:
    """Yield ``(path, slot)`` for every slot in the tree, depth first.

    Only plain container values are descended into; nothing is resolved.
    """
    for name in list(root._slots):
        slot = root._slots[name]
        path = root._child_path(name)
        yield path, slot
        if isinstance(slot, ValueSlot) and isinstance(slot.value, Namespace):
            yield from iter_slots(slot.value)


def to_dict(root: Namespace) -> dict[str, Any]:
    """Snapshot a tree as nested dicts without resolving lazy slots.

    Lazy and forwarding slots appear as their visibility value.
    """
    result: dict[str, Any] = {}
    for name, slot in root._slots.items():
        if isinstance(slot, ValueSlot):
            value = slot.value
            result[name] = to_dict(value) if isinstance(value, Namespace) else value
        elif isinstance(slot, ForwardingSlot | TrampolineSlot):
            result[name] = slot.visibility.value
    return result
