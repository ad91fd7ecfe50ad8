# topmark:header:start
#
#   project      : WithProps
#   file         : __init__.py
#   file_relpath : src/withprops/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 The WithProps Authors
#
# topmark:header:end

"""WithProps package.

WithProps temporarily overwrites properties (attributes or mapping items) on an object
while a unit of work runs, and restores the original values afterward on every exit
path, including exceptions and task cancellation.

Public API:
    - `with_props` / `awith_props`: run a callable (or coroutine function) with
      overwrites in place.
    - `PropsOverwrite`, `overwritten`: the same as a (sync or async) context manager.
    - `props_overwritten`: the same as a decorator.
    - `merged_props`: non-mutating alternative that returns a modified copy.
    - `IGNORE`, `REMEMBER`, `ABSENT`: sentinel markers for overwrite sets.
    - `RestoreError`, `RestorePolicy`: restoration failure reporting.
"""

from __future__ import annotations

from withprops.access import AttributeAccess, ItemAccess, PropertyAccess, resolve_access
from withprops.constants import WITHPROPS_VERSION
from withprops.errors import RestoreError, RestorePolicy, WithPropsError
from withprops.guard import (
    PropsOverwrite,
    awith_props,
    overwritten,
    props_overwritten,
    with_props,
)
from withprops.markers import ABSENT, IGNORE, REMEMBER, Marker, is_marker
from withprops.merge import merged_props

__version__: str = WITHPROPS_VERSION

__all__ = [
    "ABSENT",
    "IGNORE",
    "REMEMBER",
    "AttributeAccess",
    "ItemAccess",
    "Marker",
    "PropertyAccess",
    "PropsOverwrite",
    "RestoreError",
    "RestorePolicy",
    "WithPropsError",
    "awith_props",
    "is_marker",
    "merged_props",
    "overwritten",
    "props_overwritten",
    "resolve_access",
    "with_props",
]
