# topmark:header:start
#
#   project      : WithProps
#   file         : access.py
#   file_relpath : src/withprops/access.py
#   license      : MIT
#   copyright    : (c) 2025 The WithProps Authors
#
# topmark:header:end

"""Strategies for reading, writing and deleting one named property on a target.

The guard never touches a target directly; it goes through a `PropertyAccess`:

- `AttributeAccess` for ordinary objects, modules and classes.
- `ItemAccess` for ``collections.abc.MutableMapping`` targets such as ``dict``.

[`resolve_access`][withprops.access.resolve_access] picks one of the two from the
target's type. A missing property reads as [`ABSENT`][withprops.markers.ABSENT].
"""

from __future__ import annotations

import inspect
from collections.abc import Hashable, MutableMapping
from typing import Any, Final, Protocol

from withprops.markers import ABSENT


class PropertyAccess(Protocol):
    """Structural contract for property access strategies."""

    def read(self, target: Any, key: Hashable) -> Any:
        """Return the value ``target`` exposes for ``key``, or ``ABSENT`` if missing."""
        ...

    def owns(self, target: Any, key: Hashable) -> bool:
        """Return True if ``target`` holds ``key`` itself rather than inheriting it."""
        ...

    def write(self, target: Any, key: Hashable, value: Any) -> None:
        """Set ``key`` on ``target`` to ``value``, creating the property if needed."""
        ...

    def delete(self, target: Any, key: Hashable) -> None:
        """Remove ``key`` from ``target``; a missing property is left missing."""
        ...


def _is_data_descriptor(owner: type, name: str) -> bool:
    """Return True if ``name`` resolves to a data descriptor on ``owner``.

    Properties and ``__slots__`` members are data descriptors: their value lives behind
    ``__get__``/``__set__`` rather than in the instance ``__dict__``.
    """
    attr: Any = inspect.getattr_static(owner, name, ABSENT)
    if attr is ABSENT:
        return False
    kind: type = type(attr)
    return hasattr(kind, "__set__") or hasattr(kind, "__delete__")


class AttributeAccess:
    """Attribute access with ``getattr``/``setattr``/``delattr`` semantics.

    Reads return what ``getattr`` sees, inherited values included. Ownership decides
    how a property is put back:

    - A data descriptor on the type (``property``, ``__slots__`` member) is owned when
      it currently has a value; an unset slot reads as ``ABSENT``.
    - A name in the target's own ``__dict__`` is owned.
    - A name found statically anywhere else (class attribute, method, base class) is
      inherited. Restoring it deletes the override so the inherited value shows again.
    - A name only reachable through ``__getattr__`` (delegating proxies) is owned.
    """

    def _check_key(self, key: Hashable) -> str:
        if not isinstance(key, str):
            raise TypeError(f"Attribute names must be strings, got {type(key).__name__}: {key!r}")
        return key

    def read(self, target: Any, key: Hashable) -> Any:
        """Return the attribute value visible on ``target``, or ``ABSENT``."""
        return getattr(target, self._check_key(key), ABSENT)

    def owns(self, target: Any, key: Hashable) -> bool:
        """Return True if the attribute is held by ``target`` rather than inherited."""
        name: str = self._check_key(key)
        if _is_data_descriptor(type(target), name):
            return getattr(target, name, ABSENT) is not ABSENT
        instance_dict: Any = getattr(target, "__dict__", None)
        if instance_dict is not None and name in instance_dict:
            return True
        if inspect.getattr_static(target, name, ABSENT) is not ABSENT:
            return False
        return getattr(target, name, ABSENT) is not ABSENT

    def write(self, target: Any, key: Hashable, value: Any) -> None:
        """Set the attribute with ``setattr``."""
        setattr(target, self._check_key(key), value)

    def delete(self, target: Any, key: Hashable) -> None:
        """Remove the attribute held by ``target``; inherited values become visible again."""
        name: str = self._check_key(key)
        if self.owns(target, name):
            delattr(target, name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class ItemAccess:
    """Item access for mutable mappings (``target[key]``)."""

    def read(self, target: Any, key: Hashable) -> Any:
        """Return ``target[key]``, or ``ABSENT`` if the key is missing."""
        # Membership first: defaultdict-like targets must not grow on read
        if key in target:
            return target[key]
        return ABSENT

    def owns(self, target: Any, key: Hashable) -> bool:
        """Return True if ``key`` is in the mapping."""
        return key in target

    def write(self, target: Any, key: Hashable, value: Any) -> None:
        """Set ``target[key]``."""
        target[key] = value

    def delete(self, target: Any, key: Hashable) -> None:
        """Remove ``target[key]`` if present."""
        if key in target:
            del target[key]

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


ATTRIBUTE_ACCESS: Final[AttributeAccess] = AttributeAccess()
ITEM_ACCESS: Final[ItemAccess] = ItemAccess()


def resolve_access(target: object) -> PropertyAccess:
    """Return the access strategy matching ``target``.

    Args:
        target (object): The object whose properties will be overwritten.

    Returns:
        PropertyAccess: `ItemAccess` for mutable mappings, `AttributeAccess` otherwise.
    """
    if isinstance(target, MutableMapping):
        return ITEM_ACCESS
    return ATTRIBUTE_ACCESS
