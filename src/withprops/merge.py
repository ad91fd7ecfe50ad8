# topmark:header:start
#
#   project      : WithProps
#   file         : merge.py
#   file_relpath : src/withprops/merge.py
#   license      : MIT
#   copyright    : (c) 2025 The WithProps Authors
#
# topmark:header:end

"""Non-mutating counterpart of the scope guard for concurrent code.

`with_props` mutates a shared object for the whole duration of the unit of work.
When other threads or tasks may read the same object meanwhile, build a modified copy
with [`merged_props`][withprops.merge.merged_props] and pass that copy instead.
"""

from __future__ import annotations

import copy
from collections.abc import Hashable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from withprops.access import PropertyAccess, resolve_access
from withprops.config.logging import WithPropsLogger, get_logger
from withprops.guard import normalize_overwrites
from withprops.markers import ABSENT, IGNORE, REMEMBER

if TYPE_CHECKING:
    from withprops.guard import Overwrites

logger: WithPropsLogger = get_logger(__name__)

T = TypeVar("T")


def merged_props(
    target: T,
    overwrites: Overwrites,
    *,
    access: PropertyAccess | None = None,
) -> T:
    """Return a shallow copy of ``target`` with ``overwrites`` applied.

    ``IGNORE`` and ``REMEMBER`` leave the copied value untouched; ``ABSENT`` removes
    the property from the copy. The target itself is never written.

    Mappings are copied with ``copy.copy`` so the copy keeps the mapping's type
    (``dict``, ``OrderedDict``, ...). Other objects are copied with ``copy.copy`` too,
    which honors ``__copy__`` and ``__reduce_ex__``.

    Args:
        target (T): The object to copy.
        overwrites (Overwrites): Property names mapped to new values or markers.
        access (PropertyAccess | None): Access strategy; resolved from the target when None.

    Returns:
        T: The modified copy.

    Raises:
        TypeError: If ``copy.copy`` returns the target itself (classes, for instance).
    """
    strategy: PropertyAccess = access if access is not None else resolve_access(target)
    merged: T = copy.copy(target)
    if merged is target:
        # copy.copy returns classes and other atomic objects unchanged
        raise TypeError(f"Cannot build a separate copy of {target!r}")

    applied: int = 0
    normalized: Mapping[Hashable, Any] = normalize_overwrites(overwrites)
    for key, proposed in normalized.items():
        if proposed is IGNORE or proposed is REMEMBER:
            continue
        if proposed is ABSENT:
            strategy.delete(merged, key)
        else:
            strategy.write(merged, key, proposed)
        applied += 1

    logger.debug("Merged %d overwrite(s) into a copy of %s", applied, type(target).__name__)
    return merged
