import io
import unittest
from contextlib import redirect_stdout
from unittest import mock

from lingoquest.app import explain
from lingoquest.util.randomness import choose, make_rng, seed_from_env


class ExplainTests(unittest.TestCase):
    def tearDown(self) -> None:
        explain.enable(False)

    def test_trace_is_silent_until_enabled(self) -> None:
        explain.enable(False)
        buf = io.StringIO()
        with redirect_stdout(buf):
            explain.trace("score_calculated", {"total": 10})
        self.assertEqual(buf.getvalue(), "")

    def test_trace_prints_one_json_line(self) -> None:
        explain.enable()
        self.assertTrue(explain.enabled())
        buf = io.StringIO()
        with redirect_stdout(buf):
            explain.trace("score_calculated", {"total": 10})
        self.assertEqual(buf.getvalue(), '[EXPLAIN] score_calculated :: {"total":10}\n')


class RandomnessTests(unittest.TestCase):
    def test_seed_env(self) -> None:
        with mock.patch.dict("os.environ", {"SEED": "12"}):
            self.assertEqual(seed_from_env(), 12)
            a = make_rng()
            b = make_rng()
            self.assertEqual([a.random() for _ in range(3)], [b.random() for _ in range(3)])
        with mock.patch.dict("os.environ", {"SEED": "abc"}):
            self.assertIsNone(seed_from_env())

    def test_choose(self) -> None:
        rng = make_rng(3)
        options = ("a", "b", "c")
        self.assertIn(choose(rng, options), options)


if __name__ == "__main__":
    unittest.main()
