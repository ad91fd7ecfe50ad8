# topmark:header:start
#
#   project      : WithProps
#   file         : errors.py
#   file_relpath : src/withprops/errors.py
#   license      : MIT
#   copyright    : (c) 2025 The WithProps Authors
#
# topmark:header:end

"""Exceptions raised by WithProps and the policy for reporting double failures.

Failures raised by the unit of work are never wrapped: they propagate as the very
same exception object once the target has been restored. The types defined here only
describe failures of the restoration itself.
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import Final

from withprops.enums import KeyedStrEnum

RestoreFailure = tuple[Hashable, Exception]
"""A property key together with the exception raised while restoring it."""


class RestorePolicy(KeyedStrEnum):
    """How to report a restoration failure when the unit of work failed as well.

    Members:
        ORIGINAL: Re-raise the unit-of-work failure unchanged. Restoration failures
            are logged and attached to it as an exception note.
        AGGREGATE: Raise a ``BaseExceptionGroup`` holding the unit-of-work failure
            and a `RestoreError`.
    """

    ORIGINAL = ("original", "Re-raise the unit-of-work failure", ("default", "first"))
    AGGREGATE = ("aggregate", "Raise an exception group with both failures", ("group", "all"))


DEFAULT_RESTORE_POLICY: Final[RestorePolicy] = RestorePolicy.ORIGINAL


class WithPropsError(Exception):
    """Base class for WithProps exceptions."""


class RestoreError(WithPropsError):
    """One or more properties could not be restored to their original value.

    Every snapshotted property is still attempted; ``failures`` lists the ones that
    failed, in restoration order.

    Attributes:
        failures (tuple[RestoreFailure, ...]): ``(key, exception)`` pairs.
    """

    def __init__(self, failures: tuple[RestoreFailure, ...]) -> None:
        self.failures: tuple[RestoreFailure, ...] = failures
        super().__init__(self._describe(failures))

    @property
    def keys(self) -> tuple[Hashable, ...]:
        """Keys that could not be restored."""
        return tuple(key for key, _exc in self.failures)

    @staticmethod
    def _describe(failures: tuple[RestoreFailure, ...]) -> str:
        details: str = "; ".join(
            f"{key!r}: {type(exc).__name__}: {exc}" for key, exc in failures
        )
        noun: str = "property" if len(failures) == 1 else "properties"
        return f"Failed to restore {len(failures)} {noun} ({details})"
