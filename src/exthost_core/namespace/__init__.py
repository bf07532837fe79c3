"""Namespace trees for extension APIs.

Two roots are used by the loader: a protected root holding the
authoritative values and a public root the hosted application reads.
"""

from .builder import (
    assign,
    create_namespace,
    define,
    define_lazy,
    is_placeholder,
    iter_slots,
    lookup,
    merge,
    parent_of,
    peek_parent,
    peek_slot,
    remove,
    split_path,
    to_dict,
    visibility,
)
from .slots import ForwardingSlot, Slot, TrampolineSlot, ValueSlot
from .tree import Exports, Namespace

__all__ = [
    # Containers
    "Namespace",
    "Exports",
    # Slots
    "Slot",
    "ValueSlot",
    "TrampolineSlot",
    "ForwardingSlot",
    # Path operations
    "create_namespace",
    "split_path",
    "parent_of",
    "lookup",
    "peek_parent",
    "peek_slot",
    "merge",
    "is_placeholder",
    "assign",
    "define",
    "define_lazy",
    "remove",
    "visibility",
    "iter_slots",
    "to_dict",
]
