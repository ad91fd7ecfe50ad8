# topmark:header:start
#
#   project      : WithProps
#   file         : markers.py
#   file_relpath : src/withprops/markers.py
#   license      : MIT
#   copyright    : (c) 2025 The WithProps Authors
#
# topmark:header:end

"""Sentinel markers used as placeholder values inside an overwrite set.

Markers are directives, not property values:

- `IGNORE`: leave the property alone and keep it out of the snapshot. Handy for
  conditional overwrites such as ``{"y": 100 if cond else IGNORE}``.
- `REMEMBER`: record the current value in the snapshot without overwriting it.
- `ABSENT`: the property does not exist. As an overwrite value it removes the property
  while the unit of work runs; as a snapshot value it means the property was missing
  and will be removed again on restore.

``None`` is an ordinary value and is written and restored like any other.

Markers are interned by name and compared by identity (``value is IGNORE``). Copying
or unpickling a marker yields the same instance.
"""

from __future__ import annotations

from threading import Lock
from typing import Any, ClassVar, Final, TypeGuard


class Marker:
    """A named, process-wide unique sentinel.

    Constructing a marker with a name that is already registered returns the
    registered instance, so ``Marker("IGNORE") is IGNORE``.

    Attributes:
        name (str): The marker's name.
    """

    __slots__ = ("name",)

    _registry: ClassVar[dict[str, Marker]] = {}
    _lock: ClassVar[Lock] = Lock()

    name: str

    def __new__(cls, name: str) -> Marker:
        """Return the marker registered under ``name``, creating it on first use.

        Args:
            name (str): Marker name; must be a non-empty identifier-like string.

        Returns:
            Marker: The interned marker.

        Raises:
            ValueError: If ``name`` is empty or blank.
        """
        if not name or not name.strip():
            raise ValueError("Marker name must be a non-empty string")
        with cls._lock:
            existing: Marker | None = cls._registry.get(name)
            if existing is not None:
                return existing
            marker: Marker = object.__new__(cls)
            object.__setattr__(marker, "name", name)
            cls._registry[name] = marker
            return marker

    def __setattr__(self, key: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} instances are immutable")

    def __delattr__(self, key: str) -> None:
        raise AttributeError(f"{type(self).__name__} instances are immutable")

    def __repr__(self) -> str:
        return f"withprops.{self.name}"

    def __reduce__(self) -> tuple[type[Marker], tuple[str]]:
        return (Marker, (self.name,))

    def __copy__(self) -> Marker:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> Marker:
        return self


IGNORE: Final[Marker] = Marker("IGNORE")
REMEMBER: Final[Marker] = Marker("REMEMBER")
ABSENT: Final[Marker] = Marker("ABSENT")


def is_marker(value: object) -> TypeGuard[Marker]:
    """Return True if ``value`` is a marker rather than an ordinary property value."""
    return isinstance(value, Marker)
