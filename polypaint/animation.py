from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
import time
from typing import Any, Callable, Literal, Mapping

from .attributes import AttributeContext, attr_spec
from .coordinates import DEFAULT_MAX_DEPTH
from .errors import AnimationDescriptorError, NoDrawableSurface
from .evaluator import Polygons
from .frame_rate import FrameRateController
from .sink import DrawingSink
from .surface import acquire_sink


LOGGER = logging.getLogger(__name__)

SchedulerState = Literal["idle", "running", "settled"]
TrackValue = float | tuple[float, ...]
Clock = Callable[[], float]
ScheduleFn = Callable[[Callable[[], Any]], Any]


def _components(value: Any, key: str, count: int) -> tuple[float, ...]:
    if count == 1:
        items = [value]
    elif isinstance(value, (list, tuple)) and len(value) == count:
        items = list(value)
    else:
        raise AnimationDescriptorError(f"{key} expects a {count}-component vector, got {value!r}")
    out: list[float] = []
    for item in items:
        if isinstance(item, bool) or not isinstance(item, (int, float)) or not math.isfinite(item):
            raise AnimationDescriptorError(f"{key} values must be finite numbers, got {value!r}")
        out.append(float(item))
    return tuple(out)


@dataclass(frozen=True)
class Track:
    key: str
    start: tuple[float, ...]
    end: tuple[float, ...]

    def value_at(self, per: float) -> TrackValue:
        values = tuple(a * (1.0 - per) + b * per for a, b in zip(self.start, self.end))
        return values[0] if len(values) == 1 else values


@dataclass(frozen=True)
class Animation:
    duration: float
    tracks: tuple[Track, ...]

    @classmethod
    def from_descriptor(cls, descriptor: Mapping[str, Any]) -> "Animation":
        """Parses ``{"duration": s, key: {"from": a, "to": b} | b, ...}``.

        Missing ``from``/``to`` fall back to the key's registry defaults.
        """
        if not isinstance(descriptor, Mapping):
            raise AnimationDescriptorError("animation descriptor must be a mapping")
        duration = descriptor.get("duration", 1.0)
        if isinstance(duration, bool) or not isinstance(duration, (int, float)) or not math.isfinite(duration):
            raise AnimationDescriptorError(f"duration must be a finite number, got {duration!r}")
        tracks: list[Track] = []
        for key, raw in descriptor.items():
            if key == "duration":
                continue
            spec = attr_spec(key)
            if not spec.animatable:
                raise AnimationDescriptorError(f"{key} is not an animatable attribute")
            bounds = raw if isinstance(raw, Mapping) else {"to": raw}
            unknown = set(bounds) - {"from", "to"}
            if unknown:
                raise AnimationDescriptorError(f"{key} has unknown fields: {sorted(unknown)}")
            start = _components(bounds.get("from", spec.default_from), key, spec.components)
            end = _components(bounds.get("to", spec.default_to), key, spec.components)
            tracks.append(Track(key=key, start=start, end=end))
        return cls(duration=float(duration), tracks=tuple(tracks))

    def progress(self, elapsed: float) -> float:
        if self.duration <= 0:
            return 1.0
        return min(1.0, max(0.0, elapsed / self.duration))


@dataclass(frozen=True)
class FrameSample:
    per: float
    values: dict[str, TrackValue]
    finished: dict[str, bool]

    @property
    def settled(self) -> bool:
        return all(self.finished.values())


def sample(animation: Animation, per: float) -> FrameSample:
    per = min(1.0, max(0.0, per))
    values: dict[str, TrackValue] = {}
    finished: dict[str, bool] = {}
    for track in animation.tracks:
        values[track.key] = track.value_at(per)
        finished[track.key] = per >= 1.0
    return FrameSample(per=per, values=values, finished=finished)


def render_frame(
    data: Any,
    sink: DrawingSink,
    frame: FrameSample,
    *,
    max_reference_depth: int = DEFAULT_MAX_DEPTH,
    clear: bool = True,
) -> Polygons:
    """Paints one animation frame: fresh context with the sampled values folded in, fresh pass."""
    context = AttributeContext()
    context.fold(frame.values)
    if clear:
        sink.clear(sink.width, sink.height)
    polygons = Polygons(max_reference_depth=max_reference_depth)
    polygons.begin_pass(sink)
    polygons.evaluate(data, context)
    return polygons


@dataclass
class AnimationScheduler:
    """Re-evaluates a shape tree every frame until all animated attributes settle.

    ``schedule`` is the host's "run this on the next frame" hook. Without it,
    ``run`` drives ticks itself at the ``FrameRateController`` cadence.
    """

    data: Any
    target: Any
    animation: Animation
    clock: Clock = time.monotonic
    schedule: ScheduleFn | None = None
    max_reference_depth: int = DEFAULT_MAX_DEPTH
    state: SchedulerState = "idle"
    frames_rendered: int = 0
    last_sample: FrameSample | None = None
    _started_at: float = field(default=0.0, repr=False)

    def start(self) -> SchedulerState:
        if self.state == "running":
            return self.state
        self._started_at = self.clock()
        self.frames_rendered = 0
        self.state = "running"
        LOGGER.debug("animation started: duration=%.3fs tracks=%d", self.animation.duration, len(self.animation.tracks))
        return self.tick()

    def stop(self) -> None:
        self.state = "settled"

    def tick(self) -> SchedulerState:
        if self.state != "running":
            return self.state
        try:
            sink = acquire_sink(self.target)
        except NoDrawableSurface as exc:
            LOGGER.warning("drawing surface gone, stopping animation: %s", exc)
            self.state = "settled"
            return self.state

        frame = sample(self.animation, self.animation.progress(self.clock() - self._started_at))
        try:
            render_frame(self.data, sink, frame, max_reference_depth=self.max_reference_depth)
        except Exception:
            self.state = "settled"
            raise
        self.frames_rendered += 1
        self.last_sample = frame

        if frame.settled:
            self.state = "settled"
            LOGGER.debug("animation settled after %d frames", self.frames_rendered)
        elif self.schedule is not None:
            self.schedule(self.tick)
        return self.state

    def run(
        self,
        rate: FrameRateController | None = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
        on_frame: Callable[["AnimationScheduler"], None] | None = None,
    ) -> int:
        """Blocking fallback loop; returns the number of frames rendered.

        ``on_frame`` sees the frames due for export at ``rate.save_fps`` and
        always the settled frame.
        """
        rate = rate or FrameRateController()
        rate.reset()
        while self.state != "settled":
            started = self.clock()
            before = self.frames_rendered
            if self.state == "idle":
                self.start()
            else:
                self.tick()
            if on_frame is not None and self.frames_rendered > before:
                elapsed = max(0.0, started - self._started_at)
                if rate.should_export(elapsed) or self.state == "settled":
                    on_frame(self)
            if self.state == "running":
                sleep(rate.compute_sleep(started, self.clock()))
        return self.frames_rendered
