# topmark:header:start
#
#   project      : WithProps
#   file         : guard.py
#   file_relpath : src/withprops/guard.py
#   license      : MIT
#   copyright    : (c) 2025 The WithProps Authors
#
# topmark:header:end

"""Temporarily overwrite properties on an object and restore them afterward.

[`with_props`][withprops.guard.with_props] applies an overwrite set to a target,
calls a unit of work with a read-only snapshot of the original values, and restores
the target on every exit path: normal return, raised exception, or cancellation.

Example:
    ```python
    config = {"debug": False, "timeout": 5000}

    def run(original):
        assert config["debug"] is True
        assert original["timeout"] == 5000

    with_props(config, {"debug": True, "timeout": 10000}, run)
    assert config == {"debug": False, "timeout": 5000}
    ```

The same algorithm is available as a context manager
([`PropsOverwrite`][withprops.guard.PropsOverwrite], also usable with ``async with``),
as a coroutine helper ([`awith_props`][withprops.guard.awith_props]) and as a
decorator ([`props_overwritten`][withprops.guard.props_overwritten]).

Warning:
    The target is mutated in place. Any other thread or task that reads it between
    apply and restore sees the overwritten values. Nothing here locks. Use
    [`merged_props`][withprops.merge.merged_props] to hand a modified copy to
    concurrent code instead.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Hashable, Iterable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, TypeVar, Union

from withprops.access import PropertyAccess, resolve_access
from withprops.config.logging import WithPropsLogger, get_logger
from withprops.config.settings import effective_restore_policy
from withprops.errors import RestoreError, RestoreFailure, RestorePolicy
from withprops.markers import ABSENT, IGNORE, REMEMBER

if TYPE_CHECKING:
    from collections.abc import Awaitable
    from types import TracebackType

logger: WithPropsLogger = get_logger(__name__)

R = TypeVar("R")
F = TypeVar("F", bound=Callable[..., Any])

Overwrites = Union[Mapping[Hashable, Any], Iterable[tuple[Hashable, Any]]]
"""An overwrite set: a mapping, or ``(key, value)`` pairs where the last pair wins."""

Snapshot = Mapping[Hashable, Any]
"""Read-only view of the original values handed to the unit of work."""


def normalize_overwrites(overwrites: Overwrites) -> dict[Hashable, Any]:
    """Return the overwrite set as an ordered dict.

    Mappings are copied as-is. Pair iterables keep the position of each key's first
    occurrence and the value of its last occurrence.

    Args:
        overwrites (Overwrites): Mapping or iterable of ``(key, value)`` pairs.

    Returns:
        dict[Hashable, Any]: The normalized overwrite set.

    Raises:
        TypeError: If an item of a pair iterable is not a 2-tuple.
    """
    if isinstance(overwrites, Mapping):
        return dict(overwrites)
    normalized: dict[Hashable, Any] = {}
    for item in overwrites:
        if not isinstance(item, tuple) or len(item) != 2:
            raise TypeError(f"Overwrite pairs must be (key, value) tuples, got {item!r}")
        key, value = item
        normalized[key] = value
    return normalized


def _count_properties(count: int) -> str:
    return f"{count} {'property' if count == 1 else 'properties'}"


class PropsOverwrite:
    """Context manager that overwrites properties on enter and restores them on exit.

    ``__enter__`` applies the overwrite set and returns the snapshot view; ``__exit__``
    restores every snapshotted property. ``async with`` runs the same steps. An
    instance guards exactly one scope and cannot be re-entered.

    Args:
        target (Any): The object to mutate. Ownership stays with the caller.
        overwrites (Overwrites): Property names mapped to new values or markers.
        access (PropertyAccess | None): Access strategy; resolved from the target when None.
        policy (RestorePolicy | str | None): Double-failure policy; resolved from the
            environment when None.

    Example:
        ```python
        with PropsOverwrite(settings, {"DEBUG": True}) as original:
            assert original["DEBUG"] is False
        ```
    """

    def __init__(
        self,
        target: Any,
        overwrites: Overwrites,
        *,
        access: PropertyAccess | None = None,
        policy: RestorePolicy | str | None = None,
    ) -> None:
        self._target: Any = target
        self._overwrites: dict[Hashable, Any] = normalize_overwrites(overwrites)
        self._access: PropertyAccess = access if access is not None else resolve_access(target)
        self._policy: RestorePolicy = effective_restore_policy(policy)
        self._snapshot: dict[Hashable, Any] = {}
        # Keys the target did not hold itself; restored by deletion
        self._removals: set[Hashable] = set()
        self._entered: bool = False
        self._active: bool = False

    @property
    def target(self) -> Any:
        """The object being overwritten."""
        return self._target

    @property
    def policy(self) -> RestorePolicy:
        """The double-failure policy in effect for this scope."""
        return self._policy

    @property
    def active(self) -> bool:
        """True between a successful apply and the end of restoration."""
        return self._active

    @property
    def snapshot(self) -> Snapshot:
        """Read-only view of the original values captured on enter."""
        return MappingProxyType(self._snapshot)

    # --- apply / restore ----------------------------------------------------

    def apply(self) -> Snapshot:
        """Apply the overwrite set and return the snapshot view.

        If reading or writing a property fails, the properties overwritten so far are
        restored and the failure propagates.

        Returns:
            Snapshot: Read-only mapping of the original values.

        Raises:
            RuntimeError: If the scope was already entered once.
        """
        if self._entered:
            raise RuntimeError(f"{type(self).__name__} cannot be entered more than once")
        self._entered = True

        target: Any = self._target
        access: PropertyAccess = self._access
        snapshot: dict[Hashable, Any] = self._snapshot

        try:
            for key, proposed in self._overwrites.items():
                if proposed is IGNORE:
                    logger.trace("Ignoring %r", key)
                    continue
                original: Any = access.read(target, key)
                owned: bool = original is not ABSENT and access.owns(target, key)
                if proposed is REMEMBER:
                    logger.trace("Remembering %r = %r", key, original)
                elif proposed is ABSENT:
                    logger.trace("Removing %r (was %r)", key, original)
                    access.delete(target, key)
                else:
                    logger.trace("Overwriting %r: %r -> %r", key, original, proposed)
                    access.write(target, key, proposed)
                # Recorded only once the write succeeded; a rejected key needs no restore
                snapshot[key] = original
                if not owned:
                    self._removals.add(key)
        except BaseException as exc:
            logger.debug(
                "Applying overwrites to %s failed (%s); rolling back %s",
                type(target).__name__,
                type(exc).__name__,
                _count_properties(len(snapshot)),
            )
            failures: tuple[RestoreFailure, ...] = self._restore_all()
            if failures:
                exc.add_note(str(RestoreError(failures)))
            raise

        self._active = True
        logger.debug(
            "Applied %d of %d overwrite(s) to %s",
            len(snapshot),
            len(self._overwrites),
            type(target).__name__,
        )
        return self.snapshot

    def _restore_all(self) -> tuple[RestoreFailure, ...]:
        """Write every snapshotted value back, continuing past individual failures."""
        target: Any = self._target
        access: PropertyAccess = self._access
        failures: list[RestoreFailure] = []

        for key, original in self._snapshot.items():
            try:
                if key in self._removals:
                    logger.trace("Restoring %r by removal", key)
                    access.delete(target, key)
                else:
                    logger.trace("Restoring %r = %r", key, original)
                    access.write(target, key, original)
            except Exception as exc:
                logger.warning("Could not restore %r on %s: %s", key, type(target).__name__, exc)
                failures.append((key, exc))

        self._active = False
        return tuple(failures)

    def restore(self, exc: BaseException | None = None) -> None:
        """Restore the target and report restoration failures.

        Args:
            exc (BaseException | None): The failure raised by the unit of work, if any.

        Raises:
            RestoreError: If restoration failed and the unit of work did not.
            BaseExceptionGroup: If both failed under ``RestorePolicy.AGGREGATE``.
        """
        failures: tuple[RestoreFailure, ...] = self._restore_all()
        logger.debug(
            "Restored %s on %s with %d failure(s)",
            _count_properties(len(self._snapshot) - len(failures)),
            type(self._target).__name__,
            len(failures),
        )
        if not failures:
            return

        error = RestoreError(failures)
        if exc is None:
            raise error from failures[0][1]
        if self._policy is RestorePolicy.AGGREGATE:
            raise BaseExceptionGroup("Unit of work and restoration both failed", [exc, error])
        exc.add_note(str(error))

    # --- context manager protocol --------------------------------------------

    def __enter__(self) -> Snapshot:
        return self.apply()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.restore(exc)

    async def __aenter__(self) -> Snapshot:
        return self.apply()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.restore(exc)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(target={type(self._target).__name__}, "
            f"keys={list(self._overwrites)!r}, policy={self._policy.key})"
        )


def with_props(
    target: Any,
    overwrites: Overwrites,
    unit_of_work: Callable[[Snapshot], R],
    *,
    access: PropertyAccess | None = None,
    policy: RestorePolicy | str | None = None,
) -> R:
    """Overwrite properties on ``target`` while ``unit_of_work`` runs, then restore them.

    Overwrite values may be any object, including ``None``, or one of the markers
    ``IGNORE`` (skip the key), ``REMEMBER`` (snapshot without overwriting) or
    ``ABSENT`` (remove the property for the duration of the call).

    Args:
        target (Any): Object or mutable mapping to mutate temporarily.
        overwrites (Overwrites): Property names mapped to new values or markers.
        unit_of_work (Callable[[Snapshot], R]): Called with the read-only snapshot of
            original values while the overwrites are in place.
        access (PropertyAccess | None): Access strategy; resolved from the target when None.
        policy (RestorePolicy | str | None): Double-failure policy.

    Returns:
        R: Whatever ``unit_of_work`` returns, after the target has been restored.

    Raises:
        RestoreError: If the unit of work succeeded but restoration failed.
    """
    with PropsOverwrite(target, overwrites, access=access, policy=policy) as snapshot:
        return unit_of_work(snapshot)


async def awith_props(
    target: Any,
    overwrites: Overwrites,
    unit_of_work: Callable[[Snapshot], Awaitable[R]],
    *,
    access: PropertyAccess | None = None,
    policy: RestorePolicy | str | None = None,
) -> R:
    """Async variant of `with_props` for a unit of work that returns an awaitable.

    Restoration runs once the awaitable stops running, including when the awaiting
    task is cancelled. The overwrites stay visible to every other task for as long as
    the awaitable is suspended.

    Args:
        target (Any): Object or mutable mapping to mutate temporarily.
        overwrites (Overwrites): Property names mapped to new values or markers.
        unit_of_work (Callable[[Snapshot], Awaitable[R]]): Coroutine function receiving
            the snapshot.
        access (PropertyAccess | None): Access strategy; resolved from the target when None.
        policy (RestorePolicy | str | None): Double-failure policy.

    Returns:
        R: The awaited result, after the target has been restored.
    """
    async with PropsOverwrite(target, overwrites, access=access, policy=policy) as snapshot:
        return await unit_of_work(snapshot)


def overwritten(target: Any, /, **overwrites: Any) -> PropsOverwrite:
    """Return a `PropsOverwrite` for string keys given as keyword arguments.

    Example:
        ```python
        with overwritten(obj, debug=True, retries=IGNORE) as original:
            ...
        ```
    """
    return PropsOverwrite(target, overwrites)


def _accepts_original_values(func: Callable[..., Any]) -> bool:
    try:
        params: Mapping[str, inspect.Parameter] = inspect.signature(func).parameters
    except (TypeError, ValueError):
        return False
    if "original_values" in params:
        return params["original_values"].kind is not inspect.Parameter.POSITIONAL_ONLY
    return any(p.kind is inspect.Parameter.VAR_KEYWORD for p in params.values())


def props_overwritten(
    overwrites: Overwrites,
    *,
    access: PropertyAccess | None = None,
    policy: RestorePolicy | str | None = None,
) -> Callable[[F], F]:
    """Decorate a function so each call runs with overwrites on its first argument.

    The wrapped function's first positional argument is the target. If the function
    accepts an ``original_values`` keyword (or ``**kwargs``), the snapshot is passed
    through it. Coroutine functions are guarded for the whole awaited call.

    Args:
        overwrites (Overwrites): Overwrite set applied on every call.
        access (PropertyAccess | None): Access strategy; resolved per target when None.
        policy (RestorePolicy | str | None): Double-failure policy.

    Returns:
        Callable[[F], F]: The decorator.
    """
    frozen: dict[Hashable, Any] = normalize_overwrites(overwrites)

    def decorator(func: F) -> F:
        pass_snapshot: bool = _accepts_original_values(func)

        def _call_kwargs(snapshot: Snapshot, kwargs: dict[str, Any]) -> dict[str, Any]:
            if pass_snapshot:
                return {**kwargs, "original_values": snapshot}
            return kwargs

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(target: Any, *args: Any, **kwargs: Any) -> Any:
                async with PropsOverwrite(target, frozen, access=access, policy=policy) as snap:
                    return await func(target, *args, **_call_kwargs(snap, kwargs))

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def wrapper(target: Any, *args: Any, **kwargs: Any) -> Any:
            with PropsOverwrite(target, frozen, access=access, policy=policy) as snap:
                return func(target, *args, **_call_kwargs(snap, kwargs))

        return wrapper  # type: ignore[return-value]

    return decorator
