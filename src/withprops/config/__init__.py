# topmark:header:start
#
#   project      : WithProps
#   file         : __init__.py
#   file_relpath : src/withprops/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 The WithProps Authors
#
# topmark:header:end

"""Runtime configuration for WithProps: environment settings and logging."""

from __future__ import annotations
