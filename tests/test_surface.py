from __future__ import annotations

import unittest

import numpy as np

from polypaint.errors import NoDrawableSurface
from polypaint.evaluator import Polygons
from polypaint.raster import RasterSink
from polypaint.sink import RecordingSink
from polypaint.surface import SurfaceRegistry, acquire_sink


class SurfaceRegistryTests(unittest.TestCase):
    def test_register_lookup_and_unregister(self) -> None:
        sink = RecordingSink()
        SurfaceRegistry.register("main-view", sink)
        self.addCleanup(SurfaceRegistry.unregister, "main-view")
        self.assertIs(SurfaceRegistry.get("main-view"), sink)
        self.assertIn("main-view", SurfaceRegistry.names())
        self.assertIs(acquire_sink("main-view"), sink)
        SurfaceRegistry.unregister("main-view")
        self.assertIsNone(SurfaceRegistry.get("main-view"))

    def test_register_requires_name(self) -> None:
        with self.assertRaises(ValueError):
            SurfaceRegistry.register("", RecordingSink())


class AcquireSinkTests(unittest.TestCase):
    def test_sink_objects_pass_through(self) -> None:
        sink = RecordingSink()
        self.assertIs(acquire_sink(sink), sink)

    def test_numpy_canvas_is_wrapped(self) -> None:
        canvas = np.zeros((3, 4, 4), dtype=np.uint8)
        sink = acquire_sink(canvas)
        self.assertIsInstance(sink, RasterSink)
        self.assertEqual((sink.width, sink.height), (4, 3))
        self.assertIs(sink.canvas, canvas)

    def test_missing_surfaces_raise(self) -> None:
        for target in ("nowhere", object(), None, np.zeros((4, 4), dtype=np.uint8), np.zeros((2, 2, 3), dtype=np.uint8)):
            with self.assertRaises(NoDrawableSurface, msg=repr(target)):
                acquire_sink(target)

    def test_closed_sink_raises(self) -> None:
        with self.assertRaises(NoDrawableSurface):
            acquire_sink(RecordingSink(closed=True))

    def test_paint_to_unknown_surface_emits_nothing(self) -> None:
        with self.assertRaises(NoDrawableSurface):
            Polygons([{"shape": "polygon", "points": [[0, 0]]}]).paint("offscreen")


if __name__ == "__main__":
    unittest.main()
