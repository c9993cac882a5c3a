from __future__ import annotations

import unittest

from polypaint.coordinates import Point, PointResolver
from polypaint.errors import BadCoordinate, BadReference, NoReferencePoint, ReferenceDepthExceeded


class ResolveCoordTests(unittest.TestCase):
    def setUp(self) -> None:
        self.resolver = PointResolver()

    def test_numbers_pass_through(self) -> None:
        self.assertEqual(self.resolver.resolve_coord(7, "x", None), 7.0)
        self.assertEqual(self.resolver.resolve_coord(-2.5, "y", None), -2.5)

    def test_relative_marker_adds_to_last_point(self) -> None:
        last = Point(10.0, 3.0)
        self.assertEqual(self.resolver.resolve_coord("@+5", "x", last), 15.0)
        self.assertEqual(self.resolver.resolve_coord("@-1", "y", last), 2.0)
        self.assertEqual(self.resolver.resolve_coord("@", "x", last), 10.0)

    def test_plain_string_is_absolute(self) -> None:
        self.assertEqual(self.resolver.resolve_coord("-3", "x", Point(10.0, 0.0)), -3.0)
        self.assertEqual(self.resolver.resolve_coord("-3", "x", None), -3.0)

    def test_relative_without_last_point_fails(self) -> None:
        with self.assertRaises(NoReferencePoint):
            self.resolver.resolve_coord("@5", "x", None)

    def test_malformed_text_fails(self) -> None:
        for text in ("abc", "@x", "", "nan", "inf"):
            with self.assertRaises(BadCoordinate, msg=text):
                self.resolver.resolve_coord(text, "x", Point(0.0, 0.0))

    def test_nested_axis_mapping(self) -> None:
        self.assertEqual(self.resolver.resolve_coord({"x": {"x": 4}}, "x", None), 4.0)

    def test_delta_from_last_point_may_itself_be_relative(self) -> None:
        last = Point(10.0, 3.0)
        self.assertEqual(self.resolver.resolve_coord({"dx": 2}, "x", last), 12.0)
        self.assertEqual(self.resolver.resolve_coord({"dx": "@+2"}, "x", last), 22.0)

    def test_delta_without_reference_fails(self) -> None:
        with self.assertRaises(NoReferencePoint):
            self.resolver.resolve_coord({"dx": 2}, "x", None)

    def test_unsupported_values_fail(self) -> None:
        with self.assertRaises(BadCoordinate):
            self.resolver.resolve_coord(None, "x", None)
        with self.assertRaises(BadCoordinate):
            self.resolver.resolve_coord(True, "x", None)
        with self.assertRaises(BadCoordinate):
            self.resolver.resolve_coord({"dy": 1}, "x", Point(0.0, 0.0))
        with self.assertRaises(BadReference):
            self.resolver.resolve_coord(lambda: 1.0, "x", None)

    def test_self_referencing_delta_hits_depth_guard(self) -> None:
        loop: dict[str, object] = {}
        loop["dx"] = loop
        resolver = PointResolver(max_depth=16)
        with self.assertRaises(ReferenceDepthExceeded):
            resolver.resolve_coord(loop, "x", Point(0.0, 0.0))
        self.assertEqual(resolver.resolve_coord(1, "x", None), 1.0)

    def test_depth_guard_rejects_invalid_limit(self) -> None:
        with self.assertRaises(ValueError):
            PointResolver(max_depth=0)


class ResolvePointTests(unittest.TestCase):
    def test_close_returns_first_point_of_shape(self) -> None:
        resolver = PointResolver()
        pts = resolver.resolve_points([[0, 0], [10, 0], [10, 10], "close"])
        self.assertEqual(pts[-1], Point(0.0, 0.0))

    def test_close_without_prior_points_fails(self) -> None:
        with self.assertRaises(NoReferencePoint):
            PointResolver().resolve_point("close", [])

    def test_pairs_use_previous_point_as_relative_anchor(self) -> None:
        pts = PointResolver().resolve_points([[1, 2], ["@+3", "@-2"], ["@", 7]])
        self.assertEqual(pts, [Point(1.0, 2.0), Point(4.0, 0.0), Point(4.0, 7.0)])

    def test_delta_from_named_anchor(self) -> None:
        resolver = PointResolver({"a": Point(10.0, 10.0)})
        self.assertEqual(resolver.resolve_point({"ref": "a", "dx": 5, "dy": 0}), Point(15.0, 10.0))

    def test_named_sources_are_recorded_for_later_points(self) -> None:
        resolver = PointResolver()
        resolver.resolve_points([{"name": "corner", "x": 3, "y": 4}])
        self.assertEqual(resolver.ref_points["corner"], Point(3.0, 4.0))
        pts = resolver.resolve_points(["corner", {"ref": "corner", "dx": 1, "dy": {"dy": "@+1"}}])
        self.assertEqual(pts, [Point(3.0, 4.0), Point(4.0, 13.0)])

    def test_anchor_visible_to_next_point_in_same_list(self) -> None:
        resolver = PointResolver()
        pts = resolver.resolve_points([{"name": "p", "x": 1, "y": 1}, {"ref": "p", "dx": 1, "dy": 1}])
        self.assertEqual(pts[1], Point(2.0, 2.0))

    def test_forward_reference_fails(self) -> None:
        resolver = PointResolver()
        with self.assertRaises(BadReference):
            resolver.resolve_points(["later", {"name": "later", "x": 0, "y": 0}])

    def test_anchor_mapping_declaration(self) -> None:
        resolver = PointResolver()
        resolver.resolve_anchors({"a": [1, 2], "b": {"ref": "a", "dx": 3, "dy": 0}})
        self.assertEqual(resolver.ref_points, {"a": Point(1.0, 2.0), "b": Point(4.0, 2.0)})

    def test_unclassifiable_references_fail(self) -> None:
        resolver = PointResolver()
        for ref in (True, None, 5, [1, 2, 3], (lambda: (0, 0))):
            with self.assertRaises(BadReference, msg=repr(ref)):
                resolver.resolve_point(ref, [])


if __name__ == "__main__":
    unittest.main()
