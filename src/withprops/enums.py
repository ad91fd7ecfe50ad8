# topmark:header:start
#
#   project      : WithProps
#   file         : enums.py
#   file_relpath : src/withprops/enums.py
#   license      : MIT
#   copyright    : (c) 2025 The WithProps Authors
#
# topmark:header:end

"""Enum helpers for values that are parsed from user input (environment variables).

Example:
    ```python
    class Mode(KeyedStrEnum):
        FAST = ("fast", "Skip checks", ("quick",))

    assert Mode.parse("Quick") is Mode.FAST
    ```
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Iterable

_KS = TypeVar("_KS", bound="KeyedStrEnum")


def _norm_token(s: str) -> str:
    """Normalize an identifier-like string for comparison."""
    return s.strip().lower().replace("-", "_").replace(" ", "_")


class KeyedStrEnum(str, Enum):
    """Enum where `.value` is a stable machine key and metadata lives on attributes.

    Attributes:
        label (str): Human-readable label for the member.
        aliases (tuple[str, ...]): Alternative tokens accepted by `parse()`.
    """

    label: str
    aliases: tuple[str, ...]

    def __new__(
        cls: type[_KS],
        key: str,
        label: str,
        aliases: Iterable[str] = (),
    ) -> _KS:
        """Create a member from its key, label and optional aliases.

        Args:
            key (str): The stable machine key (stored as `.value`).
            label (str): The human-readable label.
            aliases (Iterable[str]): Optional aliases for parsing.

        Returns:
            _KS: The new enum member.
        """
        obj: _KS = str.__new__(cls, key)
        obj._value_ = key
        obj.label = label
        obj.aliases = tuple(aliases)
        return obj

    def __str__(self) -> str:
        return str(self.value)

    @property
    def key(self) -> str:
        """Stable machine key (same as `.value`)."""
        return str(self.value)

    @classmethod
    def parse(cls: type[_KS], raw: str | None) -> _KS | None:
        """Parse a token into a member, or return None if nothing matches.

        The token is compared case-insensitively against each member's key, name and
        aliases, with '-' and ' ' treated as '_'.
        """
        if raw is None:
            return None
        token: str = _norm_token(raw)
        if not token:
            return None

        for member in cls:
            candidates: tuple[str, ...] = (member.value, member.name, *member.aliases)
            if any(token == _norm_token(c) for c in candidates):
                return member
        return None
