from __future__ import annotations

import time
from typing import Any, Iterable, Mapping

from .animation import Animation, AnimationScheduler, Clock, ScheduleFn, render_frame, sample
from .coordinates import DEFAULT_MAX_DEPTH
from .evaluator import Polygons
from .frame_rate import FrameRateController
from .sink import RecordingSink
from .surface import acquire_sink


def _as_animation(animation: Animation | Mapping[str, Any]) -> Animation:
    if isinstance(animation, Animation):
        return animation
    return Animation.from_descriptor(animation)


def paint(
    data: Any,
    target: Any,
    animation: Animation | Mapping[str, Any] | None = None,
    *,
    schedule: ScheduleFn | None = None,
    clock: Clock | None = None,
    rate: FrameRateController | None = None,
    max_reference_depth: int = DEFAULT_MAX_DEPTH,
) -> AnimationScheduler | None:
    """Paints ``data`` on ``target`` now, or animates it when ``animation`` is given.

    With an animation and a host ``schedule`` hook the scheduler is returned
    running; without one, frames are driven here until the animation settles.
    """
    sink = acquire_sink(target)
    if animation is None:
        Polygons(max_reference_depth=max_reference_depth).paint(sink, data)
        return None
    scheduler = AnimationScheduler(
        data=data,
        target=target,
        animation=_as_animation(animation),
        clock=clock or time.monotonic,
        schedule=schedule,
        max_reference_depth=max_reference_depth,
    )
    if schedule is not None:
        scheduler.start()
    else:
        scheduler.run(rate)
    return scheduler


def collect_primitives(data: Any, *, max_reference_depth: int = DEFAULT_MAX_DEPTH) -> RecordingSink:
    sink = RecordingSink()
    Polygons(max_reference_depth=max_reference_depth).paint(sink, data)
    return sink


def render_frames(
    data: Any,
    animation: Animation | Mapping[str, Any],
    times: Iterable[float],
    *,
    width: int = 0,
    height: int = 0,
    max_reference_depth: int = DEFAULT_MAX_DEPTH,
) -> list[RecordingSink]:
    """Records the frame an animation shows at each elapsed time, without a clock."""
    anim = _as_animation(animation)
    frames: list[RecordingSink] = []
    for elapsed in times:
        sink = RecordingSink(width=width, height=height)
        render_frame(data, sink, sample(anim, anim.progress(elapsed)), max_reference_depth=max_reference_depth)
        frames.append(sink)
    return frames
