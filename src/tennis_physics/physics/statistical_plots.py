import os
import matplotlib.pyplot as plt
import seaborn as sns
import pandas as pd
import numpy as np
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass
from .effects_simulation import Trajectory, TrajectoryIntegrator
from .impact_logical import SwingPreset, SwingPresets, compute_impact_from_swing, KMH_PER_MS


@dataclass
class ShotStatistics:
    shot_name: str
    apex_height: float
    carry: float
    flight_time: float
    exit_speed_kmh: float
    spin_rpm: float
    landing_speed_kmh: float
    termination: str


class ShotAnalyzer:
    def __init__(self, integrator: Optional[TrajectoryIntegrator] = None):
        self.integrator = integrator or TrajectoryIntegrator()
        self.shot_data: List[ShotStatistics] = []
        self.trajectories: Dict[str, Trajectory] = {}

    def add_preset(self, preset: SwingPreset) -> ShotStatistics:
        impact = compute_impact_from_swing(preset.to_parameters().sanitized())
        trajectory = self.integrator.predict(preset.start_position, impact.exit_velocity,
                                             impact.angular_velocity)
        stats = self._calculate_statistics(preset.name, trajectory,
                                           float(np.linalg.norm(impact.exit_velocity)),
                                           impact.spin_rate_rpm)
        self.shot_data.append(stats)
        self.trajectories[preset.name] = trajectory
        return stats

    def _calculate_statistics(self, name: str, trajectory: Trajectory,
                              exit_speed: float, spin_rpm: float) -> ShotStatistics:
        positions = trajectory.positions()
        landing_speed = 0.0
        if len(positions) > 1:
            dt = trajectory[-1].time - trajectory[-2].time
            if dt > 0:
                landing_speed = float(np.linalg.norm(positions[-1] - positions[-2]) / dt)

        return ShotStatistics(name, trajectory.apex(), trajectory.carry(), trajectory.flight_time(),
                              exit_speed * KMH_PER_MS, spin_rpm, landing_speed * KMH_PER_MS,
                              trajectory.termination)

    def get_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([vars(stat) for stat in self.shot_data],
                            columns=list(ShotStatistics.__dataclass_fields__))


class StatisticalPlotter:
    def __init__(self, analyzer: ShotAnalyzer):
        self.analyzer = analyzer
        self.df = analyzer.get_dataframe()
        sns.set_palette("husl")

    def plot_preset_overview(self, figsize: Tuple[int, int] = (14, 8)):
        fig, axes = plt.subplots(2, 2, figsize=figsize)
        fig.suptitle('Swing Preset Comparison', fontsize=16, fontweight='bold')

        panels = [('apex_height', 'Apex (m)'), ('carry', 'Carry (m)'),
                  ('exit_speed_kmh', 'Exit Speed (km/h)'), ('spin_rpm', 'Spin (rpm)')]
        for ax, (column, label) in zip(axes.flat, panels):
            sns.barplot(data=self.df, x='shot_name', y=column, ax=ax)
            ax.set_title(label)
            ax.set_xlabel('')

        plt.tight_layout()
        return fig

    def generate_report(self) -> str:
        report = ["SWING PRESET ANALYSIS", "=" * 50, ""]
        for _, row in self.df.iterrows():
            report.append(f"{row['shot_name'].upper()}:")
            report.append(f"  Exit speed: {row['exit_speed_kmh']:.0f} km/h, spin {row['spin_rpm']:.0f} rpm")
            report.append(f"  Apex: {row['apex_height']:.2f} m, carry {row['carry']:.1f} m "
                          f"in {row['flight_time']:.2f} s ({row['termination']})")
            report.append(f"  Landing speed: {row['landing_speed_kmh']:.0f} km/h")
            report.append("")
        return "\n".join(report)

    def save_all_plots(self, output_dir: str = "plots"):
        os.makedirs(output_dir, exist_ok=True)

        fig = self.plot_preset_overview()
        fig.savefig(f"{output_dir}/preset_overview.png", dpi=150, bbox_inches='tight')
        plt.close(fig)

        with open(f"{output_dir}/preset_report.txt", 'w') as f:
            f.write(self.generate_report())


def analyze_presets(presets: Optional[List[SwingPreset]] = None,
                    integrator: Optional[TrajectoryIntegrator] = None) -> ShotAnalyzer:
    analyzer = ShotAnalyzer(integrator)
    for preset in presets or list(SwingPresets.all().values()):
        analyzer.add_preset(preset)
    return analyzer
