"""Lazy accessors that defer activation to first use.

A trampoline is a configurable lazy slot on the public root at each of
an extension's paths. The first read of any of them removes all of them,
activates the extension and returns the protected value at the path
that was read. From then on the activator's read-only forwarding slots
answer reads.

A failed first read is fail-closed: the trampolines are already gone and
activation is not attempted again. The name keeps whatever container the
activator left, and declared paths with nothing behind them read as None.
"""

import logging
import traceback
from functools import partial
from typing import Any

from exthost_core.errors import ExtHostError
from exthost_core.logging import HostLogger
from exthost_core.namespace import (
    Namespace,
    TrampolineSlot,
    ValueSlot,
    assign,
    define_lazy,
    lookup,
    merge,
    peek_parent,
    peek_slot,
    split_path,
)
from exthost_core.types import LoadState

from .activator import ExtensionActivator
from .descriptor import ExtensionDescriptor

logger = logging.getLogger(__name__)


class TrampolineInstaller:
    """Installs and removes trampolines on the public root."""

    def __init__(
        self,
        protected: Namespace,
        public: Namespace,
        activator: ExtensionActivator,
        logger: HostLogger | None = None,
    ):
        self._protected = protected
        self._public = public
        self._activator = activator
        self._logger = logger

    def install_trampoline(self, descriptor: ExtensionDescriptor) -> bool:
        """Install a lazy slot at every entry point, then at the name.

        A path that cannot be installed (a parent segment holds a plain
        value) fails this extension only: slots already installed for it
        are taken back and it is marked FAILED.

        Returns:
            True if every path got its trampoline
        """
        paths = descriptor.paths
        try:
            for path in paths:
                define_lazy(
                    self._public,
                    path,
                    TrampolineSlot(partial(self._fire, descriptor, path), extension=descriptor.name),
                )
        except ExtHostError as e:
            error = e.with_context(extension_name=descriptor.name)
            self._uninstall(descriptor)
            descriptor.state = LoadState.FAILED
            descriptor.error = error
            if self._logger:
                self._logger.extension(descriptor.name).failed(error)
            else:
                logger.error('Error installing extension "%s": %s', descriptor.name, error)
            return False

        descriptor.state = LoadState.TRAMPOLINED
        if self._logger:
            self._logger.extension(descriptor.name).trampoline().installed(paths)
        return True

    def _own_slots(self, descriptor: ExtensionDescriptor):
        for path in descriptor.paths:
            parent = peek_parent(self._public, path, through_lazy=True)
            if parent is None:
                continue
            leaf = split_path(path)[-1]
            slot = parent._get_slot(leaf)
            if isinstance(slot, TrampolineSlot) and slot.extension == descriptor.name:
                yield path, parent, leaf, slot

    def _uninstall(self, descriptor: ExtensionDescriptor) -> None:
        """Put back what a partial installation replaced."""
        for _, parent, leaf, slot in list(self._own_slots(descriptor)):
            if slot.children is not None:
                parent._define_slot(leaf, ValueSlot(slot.children))
            else:
                parent._remove_slot(leaf)

    def delete_trampoline(self, descriptor: ExtensionDescriptor) -> None:
        """Remove this extension's lazy slots from every one of its paths.

        Members waiting below a removed slot move to the protected root,
        where activation merges them into the extension's exports.
        """
        for path, parent, leaf, slot in list(self._own_slots(descriptor)):
            parent._remove_slot(leaf)
            if slot.children is not None and slot.children._slots:
                self._stash(path, slot.children)

    def _stash(self, path: str, children: Namespace) -> None:
        current = peek_slot(self._protected, path)
        if current is None:
            assign(self._protected, path, children)
        elif isinstance(current, ValueSlot) and isinstance(current.value, Namespace):
            for clash in merge(current.value, children):
                logger.warning("Dropping member %s.%s nested under a pending trampoline", path, clash)
        else:
            logger.warning("Dropping members nested under %s: %s", path, list(children))

    def _fire(self, descriptor: ExtensionDescriptor, path: str) -> Any:
        """First read of ``path``: delete trampolines, activate, return the value."""
        trampoline_logger = (
            self._logger.extension(descriptor.name).trampoline() if self._logger else None
        )
        try:
            if trampoline_logger:
                trampoline_logger.fired(path)
            self.delete_trampoline(descriptor)
            self._activator.activate(descriptor)
            return lookup(self._protected, path)
        except Exception:
            trace = traceback.format_exc()
            if trampoline_logger:
                trampoline_logger.error(path, trace)
            else:
                logger.error("Activation through %s failed\n%s", path, trace)
            self._activator.reserve_paths(descriptor)
            return None
