import unittest

import numpy as np

from tennis_physics.control_system.collision_response import (
    BOUNCE,
    COURT,
    RACKET,
    SCORE,
    TARGET,
    CollisionResponseDispatcher,
    ContactEvent,
    DeformationState,
    RecordingSink,
    ResponseSettings,
    TargetHitState,
)
from tennis_physics.control_system.scheduler import FrameScheduler
from tennis_physics.physics.impact_logical import TennisPhysicsError


def contact(speed, normal=(0.0, 1.0, 0.0), surface=COURT):
    return ContactEvent(np.array(normal), speed, surface)


class TestDispatcher(unittest.TestCase):
    def setUp(self) -> None:
        self.sink = RecordingSink()
        self.dispatcher = CollisionResponseDispatcher(self.sink)

    def test_intensity_scales_with_speed(self) -> None:
        command = self.dispatcher.on_contact(contact(4.0))
        self.assertAlmostEqual(command.intensity, 0.2)
        np.testing.assert_allclose(command.direction, [0.0, 1.0, 0.0])
        self.assertAlmostEqual(command.decay_after, 0.1)

    def test_intensity_is_capped(self) -> None:
        command = self.dispatcher.on_contact(contact(20.0))
        self.assertAlmostEqual(command.intensity, 0.4)

    def test_negative_speed_uses_magnitude(self) -> None:
        command = self.dispatcher.on_contact(contact(-4.0, surface=RACKET))
        self.assertAlmostEqual(command.intensity, 0.2)

    def test_slow_contact_is_ignored(self) -> None:
        dispatcher = CollisionResponseDispatcher(self.sink, ResponseSettings(min_impact_speed=0.5))
        self.assertIsNone(dispatcher.on_contact(contact(0.3)))
        self.assertIsNone(dispatcher.on_contact(contact(0.5)))
        self.assertEqual(self.sink.events, [])

    def test_direction_is_normalized(self) -> None:
        command = self.dispatcher.on_contact(contact(2.0, normal=(0.0, 0.0, 3.0), surface=TARGET))
        np.testing.assert_allclose(command.direction, [0.0, 0.0, 1.0])

    def test_target_contact_scores_above_threshold(self) -> None:
        self.dispatcher.on_contact(contact(1.5, surface=TARGET))
        self.dispatcher.on_contact(contact(0.8, surface=TARGET))
        self.assertEqual(self.sink.events, [SCORE])

    def test_court_contact_signals_bounce(self) -> None:
        self.dispatcher.on_contact(contact(3.0))
        self.assertEqual(self.sink.events, [BOUNCE])

    def test_generations_increase(self) -> None:
        first = self.dispatcher.on_contact(contact(3.0))
        second = self.dispatcher.on_contact(contact(3.0))
        self.assertGreater(second.generation, first.generation)

    def test_invalid_settings_raise(self) -> None:
        with self.assertRaises(TennisPhysicsError):
            ResponseSettings(max_intensity=0.0)
        with self.assertRaises(TennisPhysicsError):
            ResponseSettings(min_impact_speed=-1.0)


class TestDeformationDecay(unittest.TestCase):
    def setUp(self) -> None:
        self.dispatcher = CollisionResponseDispatcher()
        self.scheduler = FrameScheduler()
        self.state = DeformationState()

    def test_snaps_back_after_window(self) -> None:
        self.state.apply(self.dispatcher.on_contact(contact(6.0)), self.scheduler)
        self.scheduler.advance(0.05)
        self.assertAlmostEqual(self.state.intensity, 0.3)
        self.scheduler.advance(0.06)
        self.assertEqual(self.state.intensity, 0.0)

    def test_second_contact_overwrites_and_restarts_decay(self) -> None:
        self.state.apply(self.dispatcher.on_contact(contact(6.0)), self.scheduler)
        self.scheduler.advance(0.06)
        self.state.apply(self.dispatcher.on_contact(contact(2.0, normal=(1.0, 0.0, 0.0))), self.scheduler)

        self.scheduler.advance(0.05)
        self.assertAlmostEqual(self.state.intensity, 0.1)
        np.testing.assert_allclose(self.state.direction, [1.0, 0.0, 0.0])

        self.scheduler.advance(0.06)
        self.assertEqual(self.state.intensity, 0.0)


class TestTargetHitState(unittest.TestCase):
    def test_highlight_clears_after_delay(self) -> None:
        scheduler = FrameScheduler()
        target = TargetHitState(0.5)
        target.mark(scheduler)
        self.assertTrue(target.hit)
        scheduler.advance(0.3)
        target.mark(scheduler)
        scheduler.advance(0.3)
        self.assertTrue(target.hit)
        scheduler.advance(0.3)
        self.assertFalse(target.hit)


class TestFrameScheduler(unittest.TestCase):
    def test_callbacks_fire_in_due_order(self) -> None:
        scheduler = FrameScheduler()
        fired = []
        scheduler.call_later(0.3, lambda: fired.append("late"))
        scheduler.call_later(0.1, lambda: fired.append("early"))
        self.assertEqual(scheduler.advance(0.05), 0)
        self.assertEqual(scheduler.advance(0.5), 2)
        self.assertEqual(fired, ["early", "late"])
        self.assertEqual(scheduler.pending(), 0)
        self.assertAlmostEqual(scheduler.now, 0.55)


if __name__ == "__main__":
    unittest.main()
