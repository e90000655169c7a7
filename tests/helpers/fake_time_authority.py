"""Controllable time authority for deterministic tests.

    fake_time = FakeTimeAuthority(frozen_at=datetime(2026, 3, 1, 18, 0, tzinfo=timezone.utc))
    service = VoteTokenService(..., time_authority=fake_time, ...)
    fake_time.advance(seconds=3600)

Time never moves on its own; advance() also moves the monotonic clock,
set_time() does not.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from gavel.application.ports.time_authority import TimeAuthorityProtocol

DEFAULT_FROZEN_AT = datetime(2026, 3, 1, 18, 0, 0, tzinfo=timezone.utc)


def _aware(dt: datetime) -> datetime:
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


class FakeTimeAuthority(TimeAuthorityProtocol):
    """Frozen clock that tests move explicitly."""

    def __init__(self, frozen_at: datetime | None = None) -> None:
        self._current_time = _aware(frozen_at or DEFAULT_FROZEN_AT)
        self._monotonic = 0.0

    def now(self) -> datetime:
        return self._current_time

    def utcnow(self) -> datetime:
        return self._current_time

    def monotonic(self) -> float:
        return self._monotonic

    def advance(
        self,
        seconds: float | int | None = None,
        delta: timedelta | None = None,
    ) -> None:
        """Move time forward by ``delta`` or ``seconds``.

        Raises:
            ValueError: If no amount is given or the amount is negative.
        """
        if delta is not None:
            step = delta.total_seconds()
        elif seconds is not None:
            step = float(seconds)
        else:
            raise ValueError("Must provide either 'seconds' or 'delta' argument")

        if step < 0:
            raise ValueError(f"Cannot advance time backwards, got {step} seconds")

        self._current_time += timedelta(seconds=step)
        self._monotonic += step

    def set_time(self, dt: datetime) -> None:
        """Jump to ``dt`` without touching the monotonic clock."""
        self._current_time = _aware(dt)

    def __repr__(self) -> str:
        return (
            f"FakeTimeAuthority(current_time={self._current_time.isoformat()}, "
            f"monotonic={self._monotonic:.3f})"
        )
