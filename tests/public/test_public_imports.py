# topmark:header:start
#
#   project      : WithProps
#   file         : test_public_imports.py
#   file_relpath : tests/public/test_public_imports.py
#   license      : MIT
#   copyright    : (c) 2025 The WithProps Authors
#
# topmark:header:end

"""Smoke tests for public imports and ``__all__``."""

from __future__ import annotations

import inspect

import withprops


def test_all_contains_expected_symbols() -> None:
    """``__all__`` exposes the expected stable symbols (at least this subset)."""
    expected: set[str] = {
        "with_props",
        "awith_props",
        "PropsOverwrite",
        "merged_props",
        "IGNORE",
        "REMEMBER",
        "ABSENT",
        "RestoreError",
        "RestorePolicy",
    }
    exported: set[str] = set(withprops.__all__)
    missing: set[str] = expected - exported
    assert not missing, f"Missing from withprops.__all__: {sorted(missing)}"


def test_all_symbols_resolve() -> None:
    """Every exported name exists and is a callable, a type or a marker."""
    for name in withprops.__all__:
        obj = getattr(withprops, name)
        assert callable(obj) or inspect.isclass(obj) or withprops.is_marker(obj), name


def test_version_is_a_string() -> None:
    """The package exposes its version."""
    assert isinstance(withprops.__version__, str)
    assert withprops.__version__


def test_with_props_signature_is_stable() -> None:
    """The core entry point keeps its positional parameters."""
    params = list(inspect.signature(withprops.with_props).parameters)

    assert params[:3] == ["target", "overwrites", "unit_of_work"]
    assert {"access", "policy"} <= set(params)
