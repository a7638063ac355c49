#!/usr/bin/env python3
"""
CLI for a headless swing: predict the path, strike the ball after the
racket latency, and run the live ball frame by frame while reporting
contacts, deformation and scoring.
"""

import argparse
import os

from ..physics.effects_simulation import SimulationSettings, TrajectoryIntegrator
from ..physics.impact_logical import SwingPresets
from .collision_response import (
    CollisionResponseDispatcher, DeformationState, ResponseSettings, TargetHitState
)
from .live_ball import SimulatedBall, default_targets
from .scheduler import FrameScheduler
from .shot_session import ShotSession, save_trajectory_csv


class ConsoleSink:
    icons = {'impact': '🎾', 'bounce': '⬇️ ', 'score': '🎯'}

    def __init__(self, scheduler: FrameScheduler):
        self.scheduler = scheduler

    def notify(self, event: str) -> None:
        print(f"  {self.icons.get(event, '•')} t={self.scheduler.now:5.2f}s  {event}")


def main(argv=None):
    parser = argparse.ArgumentParser(description='Simulate a tennis swing headless')
    parser.add_argument('--preset', type=str, default='forehand',
                        choices=sorted(SwingPresets.all()),
                        help='Swing preset to start from')
    parser.add_argument('--speed', type=float, default=None, help='Racket speed (km/h)')
    parser.add_argument('--face', type=float, default=None, help='Face angle (deg)')
    parser.add_argument('--path', type=float, default=None, help='Swing path angle (deg)')
    parser.add_argument('--horizontal', type=float, default=None, help='Lateral aim (deg)')
    parser.add_argument('--off-center', type=float, default=None, help='Off-center factor (0-1)')
    parser.add_argument('--dt', type=float, default=0.016, help='Physics step (s)')
    parser.add_argument('--max-steps', type=int, default=100, help='Prediction step budget')
    parser.add_argument('--frames', type=int, default=240, help='Live frames to run')
    parser.add_argument('--output', type=str, default=None,
                        help='Directory for trajectory CSV and plots')
    parser.add_argument('--gif', action='store_true',
                        help='Also animate the preset paths as a GIF (needs --output)')

    args = parser.parse_args(argv)

    integrator = TrajectoryIntegrator(SimulationSettings(dt=args.dt, max_steps=args.max_steps))
    scheduler = FrameScheduler()
    sink = ConsoleSink(scheduler)
    session = ShotSession(SwingPresets.by_name(args.preset), integrator, sink)

    overrides = {
        'speed_kmh': args.speed, 'face_angle': args.face, 'swing_path_angle': args.path,
        'horizontal_angle': args.horizontal, 'off_center_factor': args.off_center,
    }
    for name, value in overrides.items():
        if value is not None:
            session.update_parameter(name, value)

    preset = session.preset
    print(f"🎾 {preset.name}: {preset.speed_kmh:.0f} km/h, face {preset.face_angle:+.1f}°, "
          f"path {preset.swing_path_angle:+.1f}°, aim {preset.horizontal_angle:+.1f}°, "
          f"off-center {preset.off_center_factor:.2f}")

    trajectory = session.predicted_trajectory()
    print(f"📈 Prediction: {len(trajectory)} points, apex {trajectory.apex():.2f} m, "
          f"carry {trajectory.carry():.1f} m, ended by {trajectory.termination}")

    ball = SimulatedBall(integrator, targets=default_targets())
    dispatcher = CollisionResponseDispatcher(sink, ResponseSettings())
    deformation = DeformationState()
    target_hit = TargetHitState(dispatcher.settings.target_reset_after)

    session.swing(ball, scheduler)
    print("=" * 60)
    for _ in range(args.frames):
        scheduler.advance(args.dt)
        if session.last_impact is None:
            continue
        for event in ball.tick(args.dt):
            if dispatcher.is_score(event):
                target_hit.mark(scheduler)
            command = dispatcher.on_contact(event)
            if command is not None:
                deformation.apply(command, scheduler)
                print(f"     {event.surface:6} squash {command.intensity:.3f} "
                      f"at {event.impact_speed:.2f} m/s")
    print("=" * 60)

    analytics = session.last_analytics
    if analytics is not None:
        print(f"Exit speed: {analytics.exit_speed_kmh} km/h")
        print(f"Spin:       {analytics.spin_rpm} rpm")
        print(f"Lift force: {analytics.lift_force} N")

    if args.output:
        os.makedirs(args.output, exist_ok=True)
        csv_path = save_trajectory_csv(trajectory, os.path.join(args.output, 'trajectory.csv'))
        print(f"\n✅ Trajectory saved to: {csv_path}")

        from ..physics.animation_display import (
            create_trajectory_gif, plot_trajectories, use_headless_backend
        )
        from ..physics.statistical_plots import StatisticalPlotter, analyze_presets
        use_headless_backend()
        plot_trajectories({preset.name: trajectory}, save_path=os.path.join(args.output, 'trajectory.png'))
        analyzer = analyze_presets(integrator=integrator)
        StatisticalPlotter(analyzer).save_all_plots(args.output)
        print(f"📊 Plots saved to: {args.output}/")

        if args.gif:
            gif_path = os.path.join(args.output, 'presets.gif')
            if create_trajectory_gif(analyzer.trajectories, gif_path):
                print(f"🎬 Animation saved to: {gif_path}")

    return 0


if __name__ == '__main__':
    main()
