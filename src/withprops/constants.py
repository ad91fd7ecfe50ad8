# topmark:header:start
#
#   project      : WithProps
#   file         : constants.py
#   file_relpath : src/withprops/constants.py
#   license      : MIT
#   copyright    : (c) 2025 The WithProps Authors
#
# topmark:header:end

"""WithProps constants."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version

DISTRIBUTION_NAME: str = "withprops"

try:
    WITHPROPS_VERSION: str = get_version(DISTRIBUTION_NAME)
except PackageNotFoundError:
    # Running from a source checkout that was never installed
    WITHPROPS_VERSION = "0.0.0+unknown"
