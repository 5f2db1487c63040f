import tempfile
import unittest
from pathlib import Path

from wordsearch.core.constants import PlacementStrategy, SessionStatus
from wordsearch.core.exceptions import StoreError
from wordsearch.core.models import Settings
from wordsearch.data.catalog import WordSet
from wordsearch.engine.session import PuzzleSession, SessionConfig
from wordsearch.io.store import (SETTINGS_KEY, STATE_KEY, JsonFileStore, MemoryStore,
                                 clear_session, load_session, load_settings, load_statistics,
                                 record_game_solved, record_game_started, save_session,
                                 save_settings)


def prepared_session() -> PuzzleSession:
    session = PuzzleSession(
        WordSet(name="test", title="Test", words=["gato", "sol"]),
        config=SessionConfig(rows=6, cols=6, seed=2),
    )
    session.prepare()
    return session


class MemoryStoreTests(unittest.TestCase):
    def test_values_are_copied(self) -> None:
        store = MemoryStore()
        value = {"words": ["gato"]}
        store.save_state("k", value)
        value["words"].append("sol")
        loaded = store.load_state("k")
        self.assertEqual(loaded, {"words": ["gato"]})
        loaded["words"].clear()
        self.assertEqual(store.load_state("k"), {"words": ["gato"]})

    def test_missing_key_returns_default(self) -> None:
        self.assertEqual(MemoryStore().load_state("k", default=3), 3)


class JsonFileStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.store = JsonFileStore(Path(self.tmpdir.name) / "db")

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def test_save_and_load(self) -> None:
        self.store.save_state(SETTINGS_KEY, {"dark_theme": True, "word_set": "países"})
        path = Path(self.tmpdir.name) / "db" / f"{SETTINGS_KEY}.json"
        self.assertTrue(path.exists())
        self.assertIn("países", path.read_text(encoding="utf-8"))
        self.assertEqual(self.store.load_state(SETTINGS_KEY), {"dark_theme": True, "word_set": "países"})

    def test_corrupt_file_returns_default(self) -> None:
        (Path(self.tmpdir.name) / "db" / "broken.json").write_text("{", encoding="utf-8")
        with self.assertLogs("wordsearch.io.store", level="WARNING"):
            self.assertEqual(self.store.load_state("broken", default={}), {})

    def test_unserializable_value_raises(self) -> None:
        with self.assertRaises(StoreError):
            self.store.save_state("k", {"cells": {(0, 0)}})


class SessionPersistenceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = MemoryStore()

    def test_nothing_saved(self) -> None:
        self.assertIsNone(load_session(self.store))

    def test_resume_in_progress_game(self) -> None:
        session = prepared_session()
        session.submit_word("gato")
        save_session(self.store, session)

        resumed = load_session(self.store)
        self.assertIsNotNone(resumed)
        self.assertEqual(resumed.status, SessionStatus.IN_PROGRESS)
        self.assertEqual(resumed.grid.rows(), session.grid.rows())
        self.assertEqual([t.normalized_text for t in resumed.remaining], ["sol"])

    def test_solved_or_cleared_game_is_not_resumed(self) -> None:
        session = prepared_session()
        session.submit_word("gato")
        session.submit_word("sol")
        save_session(self.store, session)
        self.assertIsNone(load_session(self.store))
        clear_session(self.store)
        self.assertIsNone(self.store.load_state(STATE_KEY))
        self.assertIsNone(load_session(self.store))

    def test_tampered_game_is_discarded(self) -> None:
        session = prepared_session()
        state = session.to_state()
        state["grid"][0] = "......"
        self.store.save_state(STATE_KEY, state)
        self.assertIsNone(load_session(self.store))


class SettingsAndStatisticsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = MemoryStore()

    def test_settings_round_trip(self) -> None:
        self.assertEqual(load_settings(self.store), Settings())
        settings = Settings(dark_theme=True, word_set="frutas", strategy=PlacementStrategy.RANDOM)
        save_settings(self.store, settings)
        self.assertEqual(load_settings(self.store), settings)

    def test_invalid_settings_use_defaults(self) -> None:
        self.store.save_state(SETTINGS_KEY, {"strategy": "greedy"})
        self.assertEqual(load_settings(self.store), Settings())

    def test_statistics(self) -> None:
        self.assertEqual(load_statistics(self.store).games_played, 0)
        record_game_started(self.store)
        record_game_started(self.store)
        session = prepared_session()
        session.submit_word("gato")
        stats = record_game_solved(self.store, session)
        self.assertEqual((stats.games_played, stats.games_won, stats.words_found), (2, 1, 1))
        self.assertEqual(load_statistics(self.store), stats)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
