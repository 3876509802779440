"""Stage mapping: partition the [0,1] timeline into per-element windows."""

from dataclasses import dataclass

EDGE_STAGE_NAMES = ("dots1", "dots2", "lines12", "dots3", "lines23")


def clamp(v: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, v))


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def ease_out_quad(t: float) -> float:
    """Fast start, decelerating into rest. Input is clamped to [0,1]."""
    t = clamp(t)
    return 1 - (1 - t) * (1 - t)


@dataclass(frozen=True)
class Stage:
    """A sub-interval of the timeline owning one visual element group."""

    name: str
    start: float
    end: float

    def local(self, progress: float) -> float:
        """Local progress: 0 before the window, 1 after it, linear inside."""
        if self.end <= self.start:
            return 1.0 if progress >= self.end else 0.0
        return clamp((progress - self.start) / (self.end - self.start))


def check_boundaries(boundaries: list[float]) -> None:
    """Raise ValueError unless boundaries run 0 -> 1 without decreasing."""
    if len(boundaries) < 2:
        raise ValueError("need at least two stage boundaries")
    if boundaries[0] != 0 or boundaries[-1] != 1:
        raise ValueError(f"stage boundaries must start at 0 and end at 1, got {boundaries}")
    for a, b in zip(boundaries, boundaries[1:]):
        if b < a:
            raise ValueError(f"stage boundaries must be non-decreasing, got {boundaries}")


def build_stages(boundaries: list[float], names: tuple[str, ...] = EDGE_STAGE_NAMES) -> dict[str, Stage]:
    """Turn n+1 boundaries into n consecutive, gap-free stages keyed by name."""
    check_boundaries(boundaries)
    if len(names) != len(boundaries) - 1:
        raise ValueError(f"{len(boundaries)} boundaries cannot name {len(names)} stages")
    return {
        name: Stage(name, start, end)
        for name, start, end in zip(names, boundaries, boundaries[1:])
    }


def stage_progress(progress: float, stages: dict[str, Stage]) -> dict[str, float]:
    """Map one global progress value to every stage's local progress."""
    return {name: stage.local(progress) for name, stage in stages.items()}
