from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from polypaint.animation import AnimationScheduler
from polypaint.api import collect_primitives
from polypaint.config import Scene, load_scene
from polypaint.evaluator import Polygons
from polypaint.frame_pipeline import fit_frame, frame_to_image
from polypaint.frame_rate import FrameRateController
from polypaint.raster import RasterSink


LOGGER = logging.getLogger("polypaint")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="polypaint")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Paint a scene document (JSON or TOML) to a PNG.")
    render.add_argument("scene", type=Path)
    render.add_argument("--out", type=Path, required=True)
    _add_output_size_args(render)

    primitives = sub.add_parser("primitives", help="Print the drawing operations a scene produces as JSON.")
    primitives.add_argument("scene", type=Path)

    animate = sub.add_parser("animate", help="Run a scene's animation and write one PNG per saved frame.")
    animate.add_argument("scene", type=Path)
    animate.add_argument("--out-dir", type=Path, required=True)
    animate.add_argument("--fps", type=int, default=None, help="Tick rate. Default: the scene's render.fps.")
    animate.add_argument("--save-fps", type=int, default=None, help="Export rate. Default: every tick.")
    _add_output_size_args(animate)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    scene = load_scene(args.scene)
    LOGGER.debug("scene %s: %dx%d, %d top-level shapes", scene.name, scene.width, scene.height, len(scene.shapes))

    if args.command == "render":
        sink = scene.new_sink()
        Polygons(scene.shapes, max_reference_depth=scene.settings.max_reference_depth).paint(sink)
        out = _export(sink, scene, args.out, args.width, args.height, args.stretch)
        print(f"rendered {scene.name}: {out}")
        return

    if args.command == "primitives":
        recorded = collect_primitives(scene.shapes, max_reference_depth=scene.settings.max_reference_depth)
        print(json.dumps(recorded.to_list(), indent=2))
        return

    if args.command == "animate":
        if scene.animation is None:
            raise RuntimeError(f"scene {scene.name!r} has no animate section")
        args.out_dir.mkdir(parents=True, exist_ok=True)
        rate = FrameRateController(target_fps=args.fps or scene.settings.fps, save_fps=args.save_fps)
        sink = scene.new_sink()
        saved: list[Path] = []

        def _save(scheduler: AnimationScheduler) -> None:
            path = args.out_dir / f"{scene.name}_{len(saved):04d}.png"
            saved.append(_export(sink, scene, path, args.width, args.height, args.stretch))

        scheduler = AnimationScheduler(
            data=scene.shapes,
            target=sink,
            animation=scene.animation,
            max_reference_depth=scene.settings.max_reference_depth,
        )
        frames = scheduler.run(rate, on_frame=_save)
        print(f"animation complete: frames={frames} saved={len(saved)} dir={args.out_dir}")
        return

    raise RuntimeError(f"unsupported command: {args.command}")


def _add_output_size_args(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument("--width", type=int, default=None, help="Output width. Default: scene viewport.")
    cmd.add_argument("--height", type=int, default=None, help="Output height. Default: scene viewport.")
    cmd.add_argument("--stretch", action="store_true", help="Stretch to the output size instead of letterboxing.")


def _resolve_output_dimensions(scene: Scene, width: int | None, height: int | None) -> tuple[int, int]:
    aspect = float(scene.width) / float(scene.height)
    if width is not None and width <= 0:
        raise ValueError("width must be > 0")
    if height is not None and height <= 0:
        raise ValueError("height must be > 0")
    if width is not None and height is not None:
        return width, height
    if width is not None:
        return width, max(1, int(round(width / aspect)))
    if height is not None:
        return max(1, int(round(height * aspect))), height
    return scene.width, scene.height


def _export(
    sink: RasterSink,
    scene: Scene,
    path: Path,
    width: int | None,
    height: int | None,
    stretch: bool,
) -> Path:
    out_w, out_h = _resolve_output_dimensions(scene, width, height)
    frame = fit_frame(
        sink.to_tensor(),
        out_w,
        out_h,
        preserve_aspect_ratio=scene.settings.preserve_aspect_ratio and not stretch,
        matte=scene.background,
    )
    frame_to_image(frame).save(path, format="PNG")
    return path


if __name__ == "__main__":
    main()
