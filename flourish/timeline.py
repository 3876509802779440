"""Wall-clock animation timeline.

The timeline is a small state machine (idle -> running -> settled). Each call
to ``step`` maps a frame timestamp to global progress in [0,1] and says
whether another frame should be scheduled. Scheduling itself is left to the
caller, so the timeline can be driven by a real clock or by a test.
"""

from dataclasses import dataclass
from enum import Enum

from flourish.stages import clamp


class AnimationState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SETTLED = "settled"


@dataclass(frozen=True)
class FrameState:
    progress: float
    state: AnimationState
    elapsed_ms: float


class Timeline:
    """Fixed-duration timeline whose start is captured on the first frame."""

    def __init__(self, duration_ms: float) -> None:
        if duration_ms <= 0:
            raise ValueError(f"duration must be positive, got {duration_ms}")
        self.duration_ms = duration_ms
        self.start_time: float | None = None
        self.state = AnimationState.IDLE

    def progress_at(self, now: float) -> float:
        if self.start_time is None:
            return 0.0
        return clamp((now - self.start_time) / self.duration_ms)

    def step(self, now: float) -> tuple[FrameState, bool]:
        """Advance to ``now`` (ms). Returns the frame state and whether to continue."""
        if self.start_time is None:
            # Lazily anchored so event dispatch latency does not eat into the run.
            self.start_time = now
        elapsed = now - self.start_time
        progress = self.progress_at(now)

        if progress >= 1:
            self.state = AnimationState.SETTLED
            return FrameState(1.0, self.state, elapsed), False

        self.state = AnimationState.RUNNING
        return FrameState(progress, self.state, elapsed), True

    def restart(self) -> None:
        self.start_time = None
        self.state = AnimationState.IDLE
