import unittest

from lingoquest.app.events import EventBus
from lingoquest.config.constants import RewardTier
from lingoquest.rewards.engine import ACTOR_ACHIEVEMENTS, DIRECTOR_FACTS, RewardEngine
from lingoquest.rewards.formatting import NO_COMPARISON, PLACEHOLDER
from lingoquest.rewards.presenter import RewardBoard
from lingoquest.util.randomness import make_rng

from support import TITANIC, FakeClock, Recorder

ALL_TIERS = [RewardTier.BOX_OFFICE, RewardTier.DIRECTOR, RewardTier.HERO]


def _engine(seed: int = 1):
    bus = EventBus()
    board = RewardBoard()
    clock = FakeClock(100.0)
    engine = RewardEngine(bus, presenter=board, clock=clock, rng=make_rng(seed))
    return engine, board, clock, Recorder(bus)


class UnlockTests(unittest.TestCase):
    def test_three_correct_unlock_all_tiers_in_order(self) -> None:
        engine, board, _, rec = _engine()
        results = [engine.process_answer(True, TITANIC) for _ in range(3)]

        self.assertEqual(results[0], [RewardTier.BOX_OFFICE])
        self.assertEqual(results[1], [RewardTier.BOX_OFFICE, RewardTier.DIRECTOR])
        self.assertEqual(engine.active_rewards, ALL_TIERS)
        self.assertEqual([r.type for r in engine.reward_history], ALL_TIERS)
        self.assertEqual([e.streak for e in rec.named("rewardUnlocked")], [1, 2, 3])
        self.assertEqual(board.visible(), engine.reward_history)

    def test_each_tier_unlocks_once_per_streak(self) -> None:
        engine, _, _, _ = _engine()
        for _ in range(6):
            engine.process_answer(True, TITANIC)
        self.assertEqual(len(engine.reward_history), 3)
        self.assertEqual(engine.current_streak, 6)
        self.assertEqual(engine.total_correct, 6)

    def test_box_office_payload(self) -> None:
        engine, _, _, _ = _engine()
        engine.process_answer(True, TITANIC)
        record = engine.reward_history[0]
        self.assertEqual(record.title, "Box Office Revealed! 💰")
        self.assertEqual(record.data["hollywood"], "$2.2B")
        self.assertEqual(record.data["bollywood"], "$1.5B")
        self.assertEqual(record.data["comparison"], "Hollywood slightly outperformed Bollywood.")
        self.assertEqual(record.unlocked, 100.0)

    def test_director_and_hero_payloads(self) -> None:
        engine, _, _, _ = _engine()
        for _ in range(3):
            engine.process_answer(True, TITANIC)
        director = engine.active_record(RewardTier.DIRECTOR)
        hero = engine.active_record(RewardTier.HERO)
        self.assertEqual(director.data["name"], "James Cameron")
        self.assertEqual(director.data["net_worth"], "$700.0M")
        self.assertIn(director.data["fun_fact"], DIRECTOR_FACTS)
        self.assertEqual(hero.data["name"], "Leonardo DiCaprio")
        self.assertEqual(hero.data["net_worth"], "$260.0M")
        self.assertIn(hero.data["achievement"], ACTOR_ACHIEVEMENTS)

    def test_camel_case_metadata_is_accepted(self) -> None:
        engine, _, _, _ = _engine()
        meta = {
            "boxOffice": {"hollywood": 900_000_000, "bollywood": 100_000_000},
            "director": {"name": "Someone", "netWorth": 5_000},
        }
        engine.process_answer(True, meta)
        engine.process_answer(True, meta)
        self.assertEqual(engine.reward_history[0].data["comparison"], "Hollywood earned 9.0x more than Bollywood!")
        self.assertEqual(engine.reward_history[1].data["net_worth"], "$5.0K")

    def test_seeded_rng_picks_same_flavour_text(self) -> None:
        first, _, _, _ = _engine(seed=42)
        second, _, _, _ = _engine(seed=42)
        for engine in (first, second):
            for _ in range(3):
                engine.process_answer(True, TITANIC)
        self.assertEqual(
            [r.data for r in first.reward_history],
            [r.data for r in second.reward_history],
        )


class MalformedMetadataTests(unittest.TestCase):
    def test_missing_metadata_still_unlocks(self) -> None:
        engine, _, _, rec = _engine()
        for _ in range(3):
            engine.process_answer(True, None)
        self.assertEqual(engine.active_rewards, ALL_TIERS)
        box, director, hero = engine.reward_history
        self.assertEqual(box.data["hollywood"], PLACEHOLDER)
        self.assertEqual(box.data["comparison"], NO_COMPARISON)
        self.assertEqual(director.data["name"], PLACEHOLDER)
        self.assertEqual(hero.data["net_worth"], PLACEHOLDER)
        self.assertEqual(len(rec.named("rewardUnlocked")), 3)

    def test_wrongly_typed_fields(self) -> None:
        engine, _, _, _ = _engine()
        meta = {
            "box_office": "lots",
            "director": {"name": "  ", "net_worth": "700M"},
            "actors": ["not", "a", "mapping"],
        }
        for _ in range(3):
            engine.process_answer(True, meta)
        box, director, hero = engine.reward_history
        self.assertEqual(box.data["bollywood"], PLACEHOLDER)
        self.assertEqual(director.data["name"], PLACEHOLDER)
        self.assertEqual(director.data["net_worth"], PLACEHOLDER)
        self.assertEqual(hero.data["name"], PLACEHOLDER)

    def test_zero_bollywood_total(self) -> None:
        engine, _, _, _ = _engine()
        engine.process_answer(True, {"box_office": {"hollywood": 10, "bollywood": 0}})
        self.assertEqual(engine.reward_history[0].data["comparison"], NO_COMPARISON)


class StreakBreakTests(unittest.TestCase):
    def test_break_clears_active_but_keeps_history(self) -> None:
        engine, board, _, _ = _engine()
        for _ in range(3):
            engine.process_answer(True, TITANIC)

        active = engine.process_answer(False, TITANIC)

        self.assertEqual(active, [])
        self.assertEqual(engine.current_streak, 0)
        self.assertEqual(len(engine.reward_history), 3)
        self.assertEqual(board.visible(), [])

    def test_tier_one_unlocks_again_after_break(self) -> None:
        engine, _, _, rec = _engine()
        for _ in range(3):
            engine.process_answer(True, TITANIC)
        engine.process_answer(False, TITANIC)
        engine.process_answer(True, TITANIC)

        self.assertEqual(len(engine.reward_history), 4)
        again = engine.reward_history[-1]
        self.assertEqual(again.type, RewardTier.BOX_OFFICE)
        self.assertIsNot(again, engine.reward_history[0])
        self.assertEqual(rec.named("rewardUnlocked")[-1].streak, 1)

    def test_pinned_reward_survives_break(self) -> None:
        engine, board, _, _ = _engine()
        for _ in range(3):
            engine.process_answer(True, TITANIC)
        box = engine.active_record(RewardTier.BOX_OFFICE)
        self.assertTrue(engine.toggle_pin(box))

        active = engine.process_answer(False, TITANIC)

        self.assertEqual(active, [RewardTier.BOX_OFFICE])
        self.assertEqual(board.visible(), [box])
        # still active, so the next streak does not unlock it twice
        engine.process_answer(True, TITANIC)
        self.assertEqual(len(engine.reward_history), 3)

    def test_unpinning_makes_it_clearable_again(self) -> None:
        engine, board, _, _ = _engine()
        engine.process_answer(True, TITANIC)
        box = engine.reward_history[0]
        engine.toggle_pin(box)
        self.assertFalse(engine.toggle_pin(box))
        engine.process_answer(False, TITANIC)
        self.assertEqual(engine.active_rewards, [])
        self.assertEqual(board.visible(), [])

    def test_reset_ignores_pins(self) -> None:
        engine, board, _, _ = _engine()
        for _ in range(2):
            engine.process_answer(True, TITANIC)
        engine.toggle_pin(engine.reward_history[0])
        engine.reset()
        self.assertEqual(engine.current_streak, 0)
        self.assertEqual(engine.active_rewards, [])
        self.assertEqual(board.visible(), [])
        self.assertEqual(len(engine.reward_history), 2)

    def test_destroy_clears_history(self) -> None:
        engine, board, _, _ = _engine()
        for _ in range(3):
            engine.process_answer(True, TITANIC)
        engine.destroy()
        self.assertEqual(engine.get_reward_history(), [])
        self.assertEqual(engine.active_rewards, [])
        self.assertEqual(board.visible(), [])


class AutoDismissTests(unittest.TestCase):
    def test_unpinned_cards_expire_after_display_time(self) -> None:
        engine, board, clock, _ = _engine()
        engine.process_answer(True, TITANIC)
        clock.advance(1.0)
        engine.process_answer(True, TITANIC)
        box, director = engine.reward_history
        engine.toggle_pin(director)

        self.assertEqual(board.expire(104.9), [])
        self.assertEqual(board.expire(105.0), [box])
        self.assertEqual(board.expire(1000.0), [])
        self.assertEqual(board.visible(), [director])
        # expiry is presentation only
        self.assertEqual(engine.active_rewards, [RewardTier.BOX_OFFICE, RewardTier.DIRECTOR])

    def test_board_remembers_unlock_streak(self) -> None:
        engine, board, _, _ = _engine()
        engine.process_answer(True, TITANIC)
        engine.process_answer(True, TITANIC)
        self.assertEqual(board.streak_for(engine.reward_history[1]), 2)


if __name__ == "__main__":
    unittest.main()
