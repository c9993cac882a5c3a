from __future__ import annotations

import unittest

from polypaint.frame_rate import DEFAULT_FALLBACK_FPS, FrameRateController


class FrameRateControllerTests(unittest.TestCase):
    def test_defaults_to_fallback_rate(self) -> None:
        rate = FrameRateController()
        self.assertEqual(rate.target_fps, DEFAULT_FALLBACK_FPS)
        self.assertAlmostEqual(rate.tick_interval, 1.0 / DEFAULT_FALLBACK_FPS)
        self.assertEqual(rate.export_fps, DEFAULT_FALLBACK_FPS)

    def test_rejects_invalid_rates(self) -> None:
        with self.assertRaises(ValueError):
            FrameRateController(target_fps=0)
        with self.assertRaises(ValueError):
            FrameRateController(target_fps=30, save_fps=-1)

    def test_save_fps_is_clamped_to_target(self) -> None:
        rate = FrameRateController(target_fps=24, save_fps=100)
        self.assertEqual(rate.save_fps, 24)
        self.assertEqual(rate.export_fps, 24)

    def test_export_slots_count_from_animation_start(self) -> None:
        rate = FrameRateController(target_fps=10, save_fps=4)
        self.assertEqual([rate.export_slot(t) for t in (-1.0, 0.0, 0.2, 0.25, 0.5, 1.0)], [0, 0, 0, 1, 2, 4])

    def test_should_export_thins_ticks_to_export_cadence(self) -> None:
        rate = FrameRateController(target_fps=8, save_fps=2)
        exported = [i for i in range(8) if rate.should_export(i * 0.125)]
        self.assertEqual(exported, [0, 4])

    def test_without_export_rate_every_tick_is_exported(self) -> None:
        rate = FrameRateController(target_fps=4)
        self.assertEqual([rate.should_export(t) for t in (0.0, 0.25, 0.5)], [True, True, True])

    def test_stall_skips_missed_slots(self) -> None:
        rate = FrameRateController(target_fps=10, save_fps=5)
        self.assertTrue(rate.should_export(0.0))
        self.assertTrue(rate.should_export(3.0))
        self.assertFalse(rate.should_export(3.0))
        self.assertFalse(rate.should_export(3.1))
        self.assertTrue(rate.should_export(3.2))

    def test_reset_starts_a_new_animation(self) -> None:
        rate = FrameRateController(target_fps=4)
        self.assertTrue(rate.should_export(1.0))
        self.assertFalse(rate.should_export(0.0))
        rate.reset()
        self.assertTrue(rate.should_export(0.0))

    def test_compute_sleep_subtracts_tick_time(self) -> None:
        rate = FrameRateController(target_fps=4)
        self.assertAlmostEqual(rate.compute_sleep(1.0, 1.125), 0.125)
        self.assertEqual(rate.compute_sleep(1.0, 2.0), 0.0)
        self.assertAlmostEqual(rate.compute_sleep(5.0, 4.0), 0.25)


if __name__ == "__main__":
    unittest.main()
