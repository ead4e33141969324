"""Amplification ramp controller.

The amplification coefficient moves linearly from initial_a to future_a over
[initial_a_time, future_a_time]. All A values are stored multiplied by
A_PRECISION; timestamps are integer seconds.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from stableswap.constants import A_PRECISION, MAX_A, MIN_RAMP_TIME
from stableswap.errors import InvalidAmplificationTarget, RampAlreadyActive, RampWindowTooShort

logger = structlog.get_logger()


@dataclass
class AmplificationRamp:
    """Amplification state.

    Attributes:
        initial_a: A at the start of the current ramp (scaled)
        future_a: A at the end of the current ramp (scaled)
        initial_a_time: Ramp start timestamp
        future_a_time: Ramp end timestamp
    """

    initial_a: int
    future_a: int
    initial_a_time: int = 0
    future_a_time: int = 0

    @classmethod
    def constant(cls, a: int) -> AmplificationRamp:
        """Create a ramp pinned at human-facing A (no ramp in flight)."""
        scaled = a * A_PRECISION
        if not 0 < scaled < MAX_A * A_PRECISION:
            raise InvalidAmplificationTarget(f"A must be in (0, {MAX_A}), got {a}")
        return cls(initial_a=scaled, future_a=scaled)

    def effective_a(self, now: int) -> int:
        """Return the scaled A in effect at `now`.

        Inside the ramp window the value is interpolated with floor division,
        branching on the ramp direction so no intermediate goes negative.
        """
        t1 = self.future_a_time
        a1 = self.future_a
        if now >= t1:
            return a1

        a0 = self.initial_a
        t0 = self.initial_a_time
        elapsed = now - t0
        duration = t1 - t0
        if a1 > a0:
            return a0 + (a1 - a0) * elapsed // duration
        return a0 - (a0 - a1) * elapsed // duration

    def is_ramping(self, now: int) -> bool:
        return now < self.future_a_time

    def start(self, target_a: int, end_time: int, now: int) -> None:
        """Start ramping towards human-facing target_a, finishing at end_time.

        Raises:
            RampAlreadyActive: If the previous ramp has not ended
            RampWindowTooShort: If end_time < now + MIN_RAMP_TIME
            InvalidAmplificationTarget: Unless 0 < target_a < MAX_A
        """
        if now < self.future_a_time:
            raise RampAlreadyActive(f"Current ramp ends at {self.future_a_time}, now is {now}")
        if end_time < now + MIN_RAMP_TIME:
            raise RampWindowTooShort(
                f"Ramp must last at least {MIN_RAMP_TIME}s, got {end_time - now}s"
            )
        future_a = target_a * A_PRECISION
        if not 0 < future_a < MAX_A * A_PRECISION:
            raise InvalidAmplificationTarget(f"Target A must be in (0, {MAX_A}), got {target_a}")

        initial_a = self.effective_a(now)
        self.initial_a = initial_a
        self.future_a = future_a
        self.initial_a_time = now
        self.future_a_time = end_time

        logger.info(
            "ramp_started",
            initial_a=initial_a,
            future_a=future_a,
            start_time=now,
            end_time=end_time,
        )

    def stop(self, now: int) -> None:
        """Freeze A at its current effective value."""
        current_a = self.effective_a(now)
        self.initial_a = current_a
        self.future_a = current_a
        self.initial_a_time = now
        self.future_a_time = now

        logger.info("ramp_stopped", a=current_a, time=now)
