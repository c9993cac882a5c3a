from __future__ import annotations

import math
import unittest

from polypaint.attributes import AttributeContext
from polypaint.coordinates import Point
from polypaint.transform import angle_of, scale_factor, transform_point


class TransformTests(unittest.TestCase):
    def test_identity_without_transform_keys(self) -> None:
        self.assertEqual(transform_point(Point(3.0, -4.0), {}), Point(3.0, -4.0))

    def test_scale_about_reference_point(self) -> None:
        attrs = {"scale": 2, "refPointX": 5, "refPointY": 5}
        self.assertEqual(transform_point(Point(6.0, 7.0), attrs), Point(7.0, 9.0))

    def test_axis_scale_wins_over_uniform(self) -> None:
        attrs = {"scale": 2, "scaleX": 3}
        self.assertEqual(transform_point(Point(1.0, 1.0), attrs), Point(3.0, 2.0))

    def test_rotation_subtracts_from_polar_angle(self) -> None:
        pt = transform_point(Point(10.0, 0.0), {"rotation": math.pi / 2})
        self.assertAlmostEqual(pt.x, 0.0)
        self.assertAlmostEqual(pt.y, -10.0)

    def test_rotation_pivots_on_reference_point(self) -> None:
        pt = transform_point(Point(2.0, 1.0), {"rotationDeg": 180, "refPointX": 1, "refPointY": 1})
        self.assertAlmostEqual(pt.x, 0.0)
        self.assertAlmostEqual(pt.y, 1.0)

    def test_translation_applies_after_pivoted_ops(self) -> None:
        attrs = {"scale": 2, "refPointX": 1, "refPointY": 1, "offsetX": 10, "offsetY": -10}
        self.assertEqual(transform_point(Point(2.0, 2.0), attrs), Point(13.0, -7.0))

    def test_nested_scale_matches_single_combined_scale(self) -> None:
        nested = AttributeContext({"refPointX": 5, "refPointY": 5})
        nested.fold({"scale": 2})
        nested.fold({"scale": 3})
        direct = {"scale": 6, "refPointX": 5, "refPointY": 5}
        self.assertEqual(transform_point(Point(6.0, 7.0), nested), transform_point(Point(6.0, 7.0), direct))
        self.assertEqual(transform_point(Point(6.0, 7.0), nested), Point(11.0, 17.0))

    def test_nested_rotation_matches_single_combined_rotation(self) -> None:
        nested = AttributeContext({"refPointX": 2, "refPointY": 3})
        nested.fold({"rotationDeg": 30})
        nested.fold({"rotationDeg": 60})
        direct = {"rotationDeg": 90, "refPointX": 2, "refPointY": 3}
        a = transform_point(Point(7.0, -1.0), nested)
        b = transform_point(Point(7.0, -1.0), direct)
        self.assertAlmostEqual(a.x, b.x)
        self.assertAlmostEqual(a.y, b.y)

    def test_angle_of_prefers_radians_then_degrees(self) -> None:
        self.assertEqual(angle_of({"startAngle": 1.0, "startAngleDeg": 90}, "startAngle"), 1.0)
        self.assertAlmostEqual(angle_of({"startAngleDeg": 90}, "startAngle"), math.pi / 2)
        self.assertEqual(angle_of({}, "startAngle", 0.25), 0.25)

    def test_scale_factor_averages_axes(self) -> None:
        self.assertEqual(scale_factor({}), 1.0)
        self.assertEqual(scale_factor({"scale": 3}), 3.0)
        self.assertEqual(scale_factor({"scaleX": 2, "scaleY": -4}), 3.0)


if __name__ == "__main__":
    unittest.main()
