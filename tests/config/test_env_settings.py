# topmark:header:start
#
#   project      : WithProps
#   file         : test_env_settings.py
#   file_relpath : tests/config/test_env_settings.py
#   license      : MIT
#   copyright    : (c) 2025 The WithProps Authors
#
# topmark:header:end

"""Environment settings: restore policy resolution and `KeyedStrEnum` parsing."""

from __future__ import annotations

import pytest

from tests.conftest import parametrize
from withprops.config.settings import (
    ENV_RESTORE_POLICY,
    effective_restore_policy,
    resolve_env_restore_policy,
)
from withprops.errors import RestorePolicy


@parametrize(
    "token, expected",
    [
        ("original", RestorePolicy.ORIGINAL),
        ("ORIGINAL", RestorePolicy.ORIGINAL),
        ("default", RestorePolicy.ORIGINAL),
        ("aggregate", RestorePolicy.AGGREGATE),
        (" Group ", RestorePolicy.AGGREGATE),
        ("all", RestorePolicy.AGGREGATE),
        ("nope", None),
        ("", None),
        (None, None),
    ],
)
def test_restore_policy_parse(token: str | None, expected: RestorePolicy | None) -> None:
    """Keys, names and aliases are accepted case-insensitively."""
    assert RestorePolicy.parse(token) is expected


def test_restore_policy_metadata() -> None:
    """Members expose a stable key and a human label."""
    assert RestorePolicy.AGGREGATE.key == "aggregate"
    assert str(RestorePolicy.ORIGINAL) == "original"
    assert "exception group" in RestorePolicy.AGGREGATE.label


def test_env_policy_unset() -> None:
    """Without the variable, no policy is configured and the default applies."""
    assert resolve_env_restore_policy() is None
    assert effective_restore_policy() is RestorePolicy.ORIGINAL


def test_env_policy_set(monkeypatch: pytest.MonkeyPatch) -> None:
    """The variable sets the default, an explicit argument still wins."""
    monkeypatch.setenv(ENV_RESTORE_POLICY, "aggregate")

    assert effective_restore_policy() is RestorePolicy.AGGREGATE
    assert effective_restore_policy(RestorePolicy.ORIGINAL) is RestorePolicy.ORIGINAL


def test_env_policy_invalid_warns(monkeypatch: pytest.MonkeyPatch) -> None:
    """An unknown value is ignored with a warning."""
    monkeypatch.setenv(ENV_RESTORE_POLICY, "sometimes")

    with pytest.warns(RuntimeWarning, match="WITHPROPS_RESTORE_POLICY"):
        assert effective_restore_policy() is RestorePolicy.ORIGINAL
