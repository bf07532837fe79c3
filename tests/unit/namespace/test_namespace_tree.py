"""Unit tests for namespace containers, slots and dotted-path helpers."""

from types import SimpleNamespace

import pytest

from exthost_core.errors import ExtHostError
from exthost_core.namespace import (
    Exports,
    ForwardingSlot,
    Namespace,
    TrampolineSlot,
    ValueSlot,
    assign,
    create_namespace,
    define,
    is_placeholder,
    iter_slots,
    lookup,
    merge,
    peek_slot,
    remove,
    split_path,
    to_dict,
    visibility,
)
from exthost_core.types import Visibility


class TestSplitPath:
    """Dotted path parsing."""

    def test_splits_on_dots(self):
        assert split_path("tizen.contact.Person") == ["tizen", "contact", "Person"]

    def test_single_segment(self):
        assert split_path("tizen") == ["tizen"]

    @pytest.mark.parametrize("path", ["", "a..b", ".a", "a."])
    def test_rejects_empty_segments(self, path):
        with pytest.raises(ValueError):
            split_path(path)


class TestCreateNamespace:
    """create_namespace builds containers without clobbering."""

    def test_creates_nested_containers(self):
        root = Namespace()
        create_namespace(root, "tizen.contact")

        assert isinstance(root.tizen, Namespace)
        assert isinstance(root.tizen.contact, Namespace)
        assert list(root.tizen.contact) == []

    def test_idempotent(self):
        root = Namespace()
        create_namespace(root, "tizen.contact")
        first = root.tizen.contact

        create_namespace(root, "tizen.contact")

        assert root.tizen.contact is first

    def test_keeps_leaf_value(self):
        root = Namespace()
        assign(root, "tizen.version", "3.0")

        create_namespace(root, "tizen.version")

        assert root.tizen.version == "3.0"

    def test_keeps_siblings(self):
        root = Namespace()
        create_namespace(root, "tizen.contact")
        create_namespace(root, "tizen.alarm")

        assert set(root.tizen) == {"contact", "alarm"}

    def test_conflict_on_non_container_segment(self):
        root = Namespace()
        assign(root, "tizen", 1)

        with pytest.raises(ExtHostError) as exc_info:
            create_namespace(root, "tizen.contact")

        assert exc_info.value.code == "NAMESPACE_CONFLICT"
        assert exc_info.value.path == "tizen"
        assert root.tizen == 1

    def test_does_not_resolve_lazy_leaf(self):
        root = Namespace()
        reads = []
        define(root, "tizen", TrampolineSlot(lambda: reads.append("tizen")))

        create_namespace(root, "tizen")

        assert reads == []
        assert isinstance(peek_slot(root, "tizen"), TrampolineSlot)


class TestNamespaceAttributes:
    """Attribute access goes through slots."""

    def test_missing_member_raises_attribute_error(self):
        with pytest.raises(AttributeError):
            Namespace().missing  # noqa: B018

    def test_plain_write_and_read(self):
        ns = Namespace()
        ns.value = 5

        assert ns.value == 5
        assert "value" in ns
        assert isinstance(peek_slot(ns, "value"), ValueSlot)

    def test_forwarding_slot_is_read_only(self):
        ns = Namespace()
        define(ns, "api", ForwardingSlot(lambda: "protected"))

        with pytest.raises(ExtHostError) as exc_info:
            ns.api = "replaced"
        assert exc_info.value.code == "NAMESPACE_READONLY"

        with pytest.raises(ExtHostError):
            del ns.api

        assert ns.api == "protected"

    def test_trampoline_slot_can_be_deleted_not_assigned(self):
        ns = Namespace()
        define(ns, "api", TrampolineSlot(lambda: "value"))

        with pytest.raises(ExtHostError):
            ns.api = "replaced"

        del ns.api
        assert "api" not in ns

    def test_iteration_in_insertion_order(self):
        ns = Namespace()
        ns.b = 1
        ns.a = 2

        assert list(ns) == ["b", "a"]
        assert {"a", "b"} <= set(dir(ns))

    def test_repr_names_path(self):
        root = Namespace()
        create_namespace(root, "tizen.contact")

        assert "tizen.contact" in repr(root.tizen.contact)


class TestLookup:
    """lookup resolves lazy slots and tolerates missing paths."""

    def test_resolves_through_trampoline(self):
        root = Namespace()
        define(root, "tizen.contact", TrampolineSlot(lambda: "contact-api"))

        assert lookup(root, "tizen.contact") == "contact-api"

    def test_missing_path_returns_default(self):
        root = Namespace()

        assert lookup(root, "tizen.contact") is None
        assert lookup(root, "tizen", default=5) == 5

    def test_descends_into_plain_objects(self):
        root = Namespace()
        assign(root, "tizen.device", SimpleNamespace(model="TM1"))

        assert lookup(root, "tizen.device.model") == "TM1"


class TestPeekSlot:
    """peek_slot never triggers activation."""

    def test_does_not_resolve_leaf(self):
        root = Namespace()
        reads = []
        define(root, "tizen.contact", TrampolineSlot(lambda: reads.append(1)))

        assert isinstance(peek_slot(root, "tizen.contact"), TrampolineSlot)
        assert reads == []

    def test_intermediate_trampoline_counts_as_missing(self):
        root = Namespace()
        reads = []
        define(root, "tizen", TrampolineSlot(lambda: reads.append(1)))

        assert peek_slot(root, "tizen.contact") is None
        assert reads == []


class TestAssignDefineRemove:
    """Path mutation helpers."""

    def test_assign_creates_parents(self):
        root = Namespace()
        assign(root, "a.b.c", 1)

        assert root.a.b.c == 1

    def test_remove_returns_slot(self):
        root = Namespace()
        assign(root, "a.b", 1)

        slot = remove(root, "a.b")

        assert isinstance(slot, ValueSlot)
        assert slot.value == 1
        assert "b" not in root.a

    def test_remove_missing_returns_none(self):
        assert remove(Namespace(), "a.b") is None

    def test_remove_forwarding_slot_raises(self):
        root = Namespace()
        define(root, "a", ForwardingSlot(lambda: 1))

        with pytest.raises(ExtHostError) as exc_info:
            remove(root, "a")
        assert exc_info.value.code == "NAMESPACE_READONLY"

    def test_define_over_forwarding_slot_raises(self):
        root = Namespace()
        define(root, "a", ForwardingSlot(lambda: 1))

        with pytest.raises(ExtHostError):
            define(root, "a", ValueSlot(2))


class TestVisibility:
    """Reported visibility per slot kind and root."""

    def test_plain_value_on_protected_root_is_internal(self):
        protected = Namespace(internal=True)
        assign(protected, "tizen.contact", object())

        assert visibility(protected, "tizen.contact") == Visibility.INTERNAL

    def test_plain_value_on_public_root(self):
        public = Namespace()
        assign(public, "tizen", 1)

        assert visibility(public, "tizen") == Visibility.PUBLIC

    def test_forwarding_and_lazy(self):
        public = Namespace()
        define(public, "a", ForwardingSlot(lambda: 1))
        define(public, "b", TrampolineSlot(lambda: 2))

        assert visibility(public, "a") == Visibility.PUBLIC_READONLY
        assert visibility(public, "b") == Visibility.LAZY

    def test_missing(self):
        assert visibility(Namespace(), "nothing") is None


class TestMerge:
    """merge copies slots the target lacks."""

    def test_copies_missing_and_reports_clashes(self):
        target = Namespace()
        target.shared = "target"
        source = Namespace()
        source.shared = "source"
        define(source, "lazy", TrampolineSlot(lambda: "resolved"))

        clashes = merge(target, source)

        assert clashes == ["shared"]
        assert target.shared == "target"
        assert isinstance(peek_slot(target, "lazy"), TrampolineSlot)

    def test_placeholder_detection(self):
        root = Namespace()
        create_namespace(root, "a.b.c")

        assert is_placeholder(root)
        assert not is_placeholder(Exports("a"))
        assign(root, "a.b.c.id", "x")
        assert not is_placeholder(root)

    def test_nested_placeholder_gives_way(self):
        """Placeholders left by create_namespace never shadow real slots."""
        target = Namespace()
        create_namespace(target, "a.b.c")
        assign(target, "a.keep", 1)
        source = Namespace()
        lazy = TrampolineSlot(lambda: "resolved", extension="a.b")
        define(source, "a.b", lazy)
        exports = Exports("a.x")
        assign(source, "a.x", exports)

        clashes = merge(target, source)

        assert clashes == []
        assert peek_slot(target, "a.b") is lazy
        assert lookup(target, "a.x") is exports
        assert target.a.keep == 1

    def test_placeholder_source_adds_nothing(self):
        target = Namespace()
        target.value = 5
        source = Namespace()
        create_namespace(source, "value.deep")

        assert merge(target, source) == []
        assert target.value == 5

    def test_trampoline_adopts_real_container(self):
        target = Namespace()
        assign(target, "a.c.id", "child")
        source = Namespace()
        lazy = TrampolineSlot(lambda: "resolved", extension="a")
        define(source, "a", lazy)

        assert merge(target, source) == []
        assert peek_slot(target, "a") is lazy
        assert lazy.children.c.id == "child"


class TestSnapshots:
    """iter_slots and to_dict inspect without resolving."""

    @pytest.fixture
    def root(self):
        root = Namespace()
        assign(root, "a.b", 1)
        define(root, "a.c", TrampolineSlot(lambda: pytest.fail("resolved")))
        define(root, "d", ForwardingSlot(lambda: pytest.fail("resolved")))
        return root

    def test_to_dict(self, root):
        assert to_dict(root) == {"a": {"b": 1, "c": "lazy"}, "d": "public-readonly"}

    def test_iter_slots_depth_first(self, root):
        assert [path for path, _ in iter_slots(root)] == ["a", "a.b", "a.c", "d"]


class TestExports:
    """Exports container of one extension."""

    def test_attribute_writes(self):
        exports = Exports("tizen.contact")
        exports.find = len

        assert exports.find is len
        assert isinstance(exports, Namespace)

    def test_publish_records_entry_points(self):
        exports = Exports("tizen.contact")
        exports.publish("tizen.Person", dict)

        published = exports.published
        published["tizen.Other"] = 1

        assert exports.published == {"tizen.Person": dict}
