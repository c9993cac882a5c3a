from __future__ import annotations

from dataclasses import dataclass, field
import math


DEFAULT_FALLBACK_FPS = 60
# Absorbs float error when an elapsed time lands exactly on a slot boundary.
_SLOT_EPSILON = 1e-9


@dataclass
class FrameRateController:
    """Tick pacing for the blocking animation loop, plus export thinning.

    Export slots are ``1 / save_fps`` wide and counted from the start of the
    animation, so the first frame rendered inside each slot is exported and the
    rest are skipped. A stall skips the slots it spans instead of bursting.
    """

    target_fps: int = DEFAULT_FALLBACK_FPS
    save_fps: int | None = None
    _last_slot: int | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.target_fps <= 0:
            raise ValueError("target_fps must be > 0")
        if self.save_fps is not None and self.save_fps <= 0:
            raise ValueError("save_fps must be > 0 when provided")
        if self.save_fps is not None:
            self.save_fps = min(self.save_fps, self.target_fps)

    @property
    def tick_interval(self) -> float:
        return 1.0 / float(self.target_fps)

    @property
    def export_fps(self) -> int:
        return self.target_fps if self.save_fps is None else self.save_fps

    def reset(self) -> None:
        self._last_slot = None

    def export_slot(self, elapsed: float) -> int:
        return int(math.floor(max(0.0, elapsed) * self.export_fps + _SLOT_EPSILON))

    def should_export(self, elapsed: float) -> bool:
        """True for the first frame seen in a new export slot since ``reset``."""
        slot = self.export_slot(elapsed)
        if self._last_slot is not None and slot <= self._last_slot:
            return False
        self._last_slot = slot
        return True

    def compute_sleep(self, tick_started_at: float, tick_finished_at: float) -> float:
        elapsed = max(0.0, tick_finished_at - tick_started_at)
        return max(0.0, self.tick_interval - elapsed)
