# topmark:header:start
#
#   project      : WithProps
#   file         : settings.py
#   file_relpath : src/withprops/config/settings.py
#   license      : MIT
#   copyright    : (c) 2025 The WithProps Authors
#
# topmark:header:end

"""Environment-driven settings.

WithProps has no configuration file. Two environment variables tune its behavior:

- ``WITHPROPS_LOG_LEVEL``: log level for `setup_logging` (``TRACE``, ``DEBUG``, ``10``, ...).
- ``WITHPROPS_RESTORE_POLICY``: default [`RestorePolicy`][withprops.errors.RestorePolicy]
  (``original`` or ``aggregate``).

Precedence for the restore policy is: explicit ``policy=`` argument, then the
environment, then ``RestorePolicy.ORIGINAL``.
"""

from __future__ import annotations

import os
import warnings
from typing import Final

from withprops.errors import DEFAULT_RESTORE_POLICY, RestorePolicy

ENV_LOG_LEVEL: Final[str] = "WITHPROPS_LOG_LEVEL"
ENV_RESTORE_POLICY: Final[str] = "WITHPROPS_RESTORE_POLICY"


def resolve_env_restore_policy() -> RestorePolicy | None:
    """Return the policy configured in ``WITHPROPS_RESTORE_POLICY``, or None if unset.

    An unrecognized value triggers a ``RuntimeWarning`` and is treated as unset.
    """
    raw: str | None = os.environ.get(ENV_RESTORE_POLICY)
    if raw is None or not raw.strip():
        return None
    policy: RestorePolicy | None = RestorePolicy.parse(raw)
    if policy is None:
        accepted: str = ", ".join(p.key for p in RestorePolicy)
        warnings.warn(
            f"Ignoring {ENV_RESTORE_POLICY}={raw!r}; expected one of: {accepted}.",
            RuntimeWarning,
            stacklevel=2,
        )
    return policy


def effective_restore_policy(policy: RestorePolicy | str | None = None) -> RestorePolicy:
    """Resolve the restore policy to use for one guarded call.

    Args:
        policy (RestorePolicy | str | None): Explicit policy (member or token), or None
            to fall back to the environment and then the default.

    Returns:
        RestorePolicy: The policy in effect.

    Raises:
        ValueError: If ``policy`` is a string that names no policy.
    """
    if isinstance(policy, RestorePolicy):
        return policy
    if policy is not None:
        parsed: RestorePolicy | None = RestorePolicy.parse(policy)
        if parsed is None:
            raise ValueError(f"Unknown restore policy: {policy!r}")
        return parsed
    return resolve_env_restore_policy() or DEFAULT_RESTORE_POLICY
