import os
import tempfile
import unittest

import matplotlib
import numpy as np

matplotlib.use("Agg")

from tennis_physics.control_system.run_control import main
from tennis_physics.physics.animation_display import create_trajectory_gif, plot_trajectories
from tennis_physics.physics.effects_simulation import BallState, SimulationSettings, TrajectoryIntegrator
from tennis_physics.physics.impact_logical import BALL_RADIUS, KMH_PER_MS, SwingPresets, compute_impact_from_swing
from tennis_physics.physics.statistical_plots import StatisticalPlotter, analyze_presets


class TestPresetAnalysis(unittest.TestCase):
    def test_dataframe_has_one_row_per_preset(self) -> None:
        analyzer = analyze_presets()
        df = analyzer.get_dataframe()
        self.assertEqual(sorted(df["shot_name"]), ["Backhand", "Forehand", "Serve", "Volley"])
        self.assertTrue((df["apex_height"] > 0).all())

    def test_report_mentions_every_preset(self) -> None:
        report = StatisticalPlotter(analyze_presets()).generate_report()
        for name in ("FOREHAND", "BACKHAND", "VOLLEY", "SERVE"):
            self.assertIn(name, report)
        self.assertIn("Landing speed", report)

    def test_landing_speed_is_ball_speed_at_touchdown(self) -> None:
        integrator = TrajectoryIntegrator(SimulationSettings(max_steps=500))
        preset = SwingPresets.forehand()
        stats = analyze_presets([preset], integrator).shot_data[0]
        self.assertEqual(stats.termination, "ground")

        impact = compute_impact_from_swing(preset.to_parameters().sanitized())
        state = BallState(preset.start_position, impact.exit_velocity, impact.angular_velocity)
        while state.position[1] >= BALL_RADIUS:
            state = integrator.step(state)
        expected = float(np.linalg.norm(state.velocity)) * KMH_PER_MS
        self.assertAlmostEqual(stats.landing_speed_kmh, expected, places=4)


class TestOutputs(unittest.TestCase):
    def test_plot_is_saved(self) -> None:
        analyzer = analyze_presets()
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "paths.png")
            plot_trajectories(analyzer.trajectories, save_path=path)
            self.assertTrue(os.path.exists(path))

    def test_gif_is_written(self) -> None:
        analyzer = analyze_presets()
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "presets.gif")
            self.assertTrue(create_trajectory_gif(analyzer.trajectories, path, fps=10, dpi=40))
            self.assertTrue(os.path.exists(path))

    def test_gif_needs_trajectories(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self.assertFalse(create_trajectory_gif({}, os.path.join(tmp, "empty.gif")))

    def test_cli_runs_headless(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self.assertEqual(main(["--preset", "volley", "--frames", "120", "--output", tmp, "--gif"]), 0)
            self.assertTrue(os.path.exists(os.path.join(tmp, "trajectory.csv")))
            self.assertTrue(os.path.exists(os.path.join(tmp, "preset_report.txt")))
            self.assertTrue(os.path.exists(os.path.join(tmp, "presets.gif")))


if __name__ == "__main__":
    unittest.main()
