# topmark:header:start
#
#   project      : WithProps
#   file         : test_access.py
#   file_relpath : tests/access/test_access.py
#   license      : MIT
#   copyright    : (c) 2025 The WithProps Authors
#
# topmark:header:end

"""Property access strategies: reads, writes, deletes and ``ABSENT`` handling."""

from __future__ import annotations

from collections import OrderedDict, defaultdict
from types import ModuleType, SimpleNamespace

import pytest

from tests.targets import Guarded, LazySettings, Settings, Slotted
from withprops import ABSENT, AttributeAccess, ItemAccess, resolve_access, with_props


def test_resolve_access_by_target_type() -> None:
    """Mutable mappings use item access; everything else uses attribute access."""
    assert isinstance(resolve_access({}), ItemAccess)
    assert isinstance(resolve_access(OrderedDict()), ItemAccess)
    assert isinstance(resolve_access(SimpleNamespace()), AttributeAccess)
    assert isinstance(resolve_access(Settings), AttributeAccess)


def test_item_access_missing_key_reads_absent_without_creating_it() -> None:
    """Reading a missing key from a defaultdict does not insert it."""
    target: defaultdict[str, list[int]] = defaultdict(list)
    access = ItemAccess()

    assert access.read(target, "k") is ABSENT
    assert "k" not in target


def test_item_access_delete_missing_key_is_noop() -> None:
    """Deleting a key that is already gone leaves the mapping unchanged."""
    target: dict[str, int] = {"a": 1}
    ItemAccess().delete(target, "b")

    assert target == {"a": 1}


def test_attribute_access_reads_inherited_values_but_does_not_own_them() -> None:
    """Class attributes and methods are visible to reads yet not owned by the instance."""
    access = AttributeAccess()
    settings = Settings()

    assert access.read(settings, "region") == "eu-west-1"
    assert access.read(settings, "describe")() == "debug=False timeout=5000"
    assert access.read(settings, "debug") is False
    assert not access.owns(settings, "region")
    assert not access.owns(settings, "describe")
    assert access.owns(settings, "debug")
    assert access.owns(Settings, "region")


def test_attribute_access_delegating_proxy() -> None:
    """Names reached only through ``__getattr__`` are owned and really deleted."""
    access = AttributeAccess()
    proxy = LazySettings(DEBUG=False)

    assert access.read(proxy, "DEBUG") is False
    assert access.owns(proxy, "DEBUG")
    assert access.read(proxy, "MISSING") is ABSENT
    assert not access.owns(proxy, "MISSING")

    access.delete(proxy, "DEBUG")

    assert proxy.wrapped_names() == []


def test_attribute_access_delete_leaves_inherited_value() -> None:
    """Deleting an attribute the instance does not hold is a no-op."""
    settings = Settings()
    AttributeAccess().delete(settings, "region")

    assert settings.region == "eu-west-1"


def test_attribute_access_property_and_slots() -> None:
    """Data descriptors are read through the descriptor."""
    access = AttributeAccess()
    slotted = Slotted("disk", 10)
    del slotted.size

    assert access.read(Guarded(), "value") == "original"
    assert access.read(slotted, "name") == "disk"
    assert access.read(slotted, "size") is ABSENT
    assert access.owns(slotted, "name")
    assert not access.owns(slotted, "size")


def test_attribute_access_delete_missing_is_noop() -> None:
    """Deleting an attribute that does not exist does not raise."""
    ns = SimpleNamespace(a=1)
    AttributeAccess().delete(ns, "b")

    assert vars(ns) == {"a": 1}


def test_method_patch_on_instance_is_undone() -> None:
    """Patching a method on an instance falls back to the class method afterward."""
    settings = Settings()

    with_props(settings, {"describe": lambda: "mocked"}, lambda _snap: None)

    assert settings.describe() == "debug=False timeout=5000"
    assert "describe" not in vars(settings)


def test_class_target_restores_class_attribute() -> None:
    """Classes are valid targets; their own attributes are restored in place."""

    def unit(_snap: object) -> None:
        assert Settings.region == "ap-south-1"
        assert Settings().region == "ap-south-1"

    with_props(Settings, {"region": "ap-south-1"}, unit)

    assert Settings.region == "eu-west-1"


def test_module_target() -> None:
    """Modules are attribute targets; new attributes are removed again."""
    module = ModuleType("fake_settings")
    module.DEBUG = False  # type: ignore[attr-defined]

    def unit(snap: object) -> None:
        assert module.DEBUG is True  # type: ignore[attr-defined]
        assert module.EXTRA == 1  # type: ignore[attr-defined]

    with_props(module, {"DEBUG": True, "EXTRA": 1}, unit)

    assert module.DEBUG is False  # type: ignore[attr-defined]
    assert not hasattr(module, "EXTRA")


def test_attribute_access_rejects_non_string_key() -> None:
    """Attribute names must be strings."""
    with pytest.raises(TypeError):
        AttributeAccess().read(SimpleNamespace(), 3)
