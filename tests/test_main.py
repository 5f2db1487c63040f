import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest.mock import patch

from main import main, parse_move, play
from wordsearch.core.constants import SessionStatus
from wordsearch.data.catalog import WordSet
from wordsearch.engine.session import PuzzleSession, SessionConfig
from wordsearch.io.store import (SETTINGS_KEY, STATE_KEY, JsonFileStore, MemoryStore,
                                 load_statistics)


def move_for(token) -> str:
    cells = token.cells()
    if token.placement.reversed:
        cells = cells[::-1]
    (r1, c1), (r2, c2) = cells[0], cells[-1]
    return f"{r1} {c1} {r2} {c2}"


class ParseMoveTests(unittest.TestCase):
    def test_parse_move(self) -> None:
        self.assertEqual(parse_move("1 2 3 4"), ((1, 2), (3, 4)))
        self.assertEqual(parse_move("1,2, 3,4"), ((1, 2), (3, 4)))
        self.assertIsNone(parse_move("1 2 3"))
        self.assertIsNone(parse_move("a b c d"))


class PlayTests(unittest.TestCase):
    def test_play_until_solved(self) -> None:
        session = PuzzleSession(
            WordSet(name="test", title="Test", words=["gato", "sol"]),
            config=SessionConfig(rows=6, cols=6, seed=5),
        )
        session.prepare()
        store = MemoryStore()
        lines = ["hola", "0 0 0 99", "2 2 2 2"] + [move_for(token) for token in session.word_list]
        stdout = io.StringIO()

        play(session, store, stdin=io.StringIO("\n".join(lines) + "\n"), stdout=stdout)

        output = stdout.getvalue()
        self.assertIn("Expected four numbers", output)
        self.assertIn("Both cells must be inside the grid.", output)
        self.assertIn("Nothing selected.", output)
        self.assertIn("Found: gato", output)
        self.assertIn("Congratulations!", output)
        self.assertEqual(session.status, SessionStatus.SOLVED)
        self.assertIsNone(store.load_state(STATE_KEY))
        stats = load_statistics(store)
        self.assertEqual((stats.games_won, stats.words_found), (1, 2))

    def test_quit_keeps_game_saved(self) -> None:
        session = PuzzleSession(
            WordSet(name="test", title="Test", words=["gato", "sol"]),
            config=SessionConfig(rows=6, cols=6, seed=5),
        )
        session.prepare()
        store = MemoryStore()
        gato = next(token for token in session.word_list if token.normalized_text == "gato")

        play(session, store, stdin=io.StringIO(move_for(gato) + "\nq\n"), stdout=io.StringIO())

        saved = store.load_state(STATE_KEY)
        self.assertEqual(saved["status"], SessionStatus.IN_PROGRESS.value)
        self.assertEqual(load_statistics(store).games_won, 0)


    def test_nothing_to_find(self) -> None:
        session = PuzzleSession(
            WordSet(name="test", title="Test", words=["elefante"]),
            config=SessionConfig(rows=4, cols=4, seed=5),
        )
        session.prepare()
        stdout = io.StringIO()

        play(session, MemoryStore(), stdin=io.StringIO("0 0 0 3\n"), stdout=stdout)

        self.assertIn("No word fits this grid", stdout.getvalue())
        self.assertNotIn("Enter moves", stdout.getvalue())


class MainTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self.tmpdir.name)

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def run_main(self, *args: str) -> str:
        stdout = io.StringIO()
        with redirect_stdout(stdout):
            main(["--store-dir", str(self.root / "db"), "--log-level", "ERROR", *args])
        return stdout.getvalue()

    def test_generate_writes_output_and_state(self) -> None:
        output_path = self.root / "puzzle.json"
        printed = self.run_main("--rows", "10", "--cols", "10", "--set", "frutas", "--seed", "4",
                                "--output", str(output_path))

        puzzle = json.loads(output_path.read_text(encoding="utf-8"))
        self.assertEqual(puzzle["status"], SessionStatus.READY.value)
        self.assertEqual(puzzle["word_set"]["name"], "frutas")
        self.assertEqual(len(puzzle["grid"]), 10)
        self.assertTrue(all(len(row) == 10 and "." not in row for row in puzzle["grid"]))
        self.assertIn("Frutas", printed)
        self.assertIn("--- Placement ---", printed)
        self.assertIn("Seed: 4", printed)

        store = JsonFileStore(self.root / "db")
        self.assertEqual(store.load_state(SETTINGS_KEY)["word_set"], "frutas")
        self.assertEqual(load_statistics(store).games_played, 1)
        self.assertEqual(store.load_state(STATE_KEY)["grid"], puzzle["grid"])

    def test_resume_reuses_saved_game(self) -> None:
        first = self.root / "first.json"
        second = self.root / "second.json"
        self.run_main("--set", "colores", "--seed", "1", "--output", str(first))
        self.run_main("--resume", "--output", str(second))

        saved = json.loads(first.read_text(encoding="utf-8"))
        resumed = json.loads(second.read_text(encoding="utf-8"))
        self.assertEqual(resumed["grid"], saved["grid"])
        self.assertEqual(load_statistics(JsonFileStore(self.root / "db")).games_played, 1)

    def test_rejects_zero_max_passes(self) -> None:
        with self.assertRaises(SystemExit), redirect_stdout(io.StringIO()):
            with patch("sys.stderr", io.StringIO()) as stderr:
                main(["--max-passes", "0", "--store-dir", str(self.root / "db")])
        self.assertIn("--max-passes must be at least 1", stderr.getvalue())

    def test_rejects_bad_dimensions(self) -> None:
        with self.assertRaises(SystemExit), redirect_stdout(io.StringIO()):
            with patch("sys.stderr", io.StringIO()):
                main(["--rows", "0", "--store-dir", str(self.root / "db")])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
