import unittest

import numpy as np

from tennis_physics.control_system.collision_response import COURT, TARGET, CollisionResponseDispatcher
from tennis_physics.control_system.live_ball import SimulatedBall, TargetBox
from tennis_physics.physics.ball_control import apply_impact
from tennis_physics.physics.effects_simulation import BallState
from tennis_physics.physics.impact_logical import BALL_RADIUS, compute_impact


class TestApplyImpact(unittest.TestCase):
    def test_reset_is_idempotent(self) -> None:
        ball = SimulatedBall()
        impact = compute_impact(25.0, -5.0, 20.0, 0.1, 12.0)
        start = (0.0, 1.0, 11.0)

        first = apply_impact(ball, start, impact)
        after_first = ball.current_state()
        for _ in range(5):
            ball.tick(0.016)

        second = apply_impact(ball, start, impact)
        after_second = ball.current_state()

        self.assertTrue(first.matches(second))
        self.assertTrue(after_first.matches(after_second))
        np.testing.assert_array_equal(after_second.angular_velocity, impact.angular_velocity)
        np.testing.assert_array_equal(ball.rotation, np.zeros(3))

    def test_current_state_is_a_copy(self) -> None:
        ball = SimulatedBall()
        ball.reset(BallState([0.0, 1.0, 0.0]))
        state = ball.current_state()
        state.position[1] = 5.0
        self.assertEqual(ball.current_state().position[1], 1.0)


class TestSimulatedBall(unittest.TestCase):
    def test_drop_bounces_off_court(self) -> None:
        ball = SimulatedBall()
        ball.reset(BallState([0.0, 1.0, 0.0]))

        events = []
        for _ in range(60):
            events = ball.tick(0.016)
            if events:
                break

        self.assertEqual(len(events), 1)
        event = events[0]
        self.assertEqual(event.surface, COURT)
        np.testing.assert_array_equal(event.contact_normal, [0.0, 1.0, 0.0])
        self.assertGreater(event.impact_speed, 4.0)

        state = ball.current_state()
        self.assertEqual(state.position[1], BALL_RADIUS)
        self.assertAlmostEqual(state.velocity[1], event.impact_speed * 0.7)

    def test_target_contact_scores(self) -> None:
        ball = SimulatedBall(targets=[TargetBox((0.0, 1.5, -12.0))])
        ball.reset(BallState([0.0, 1.5, -11.9], [0.0, 0.0, -5.0]))

        events = ball.tick(0.016)
        self.assertEqual(len(events), 1)
        self.assertEqual(events[0].surface, TARGET)
        self.assertAlmostEqual(events[0].impact_speed, 5.0)
        self.assertGreater(ball.current_state().velocity[2], 0.0)
        self.assertTrue(CollisionResponseDispatcher().is_score(events[0]))

        self.assertEqual(ball.tick(0.016), [])


if __name__ == "__main__":
    unittest.main()
