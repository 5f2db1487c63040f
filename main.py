"""CLI entrypoint for the word search generator."""

from __future__ import annotations

import argparse
import json
import random
import sys
from pathlib import Path
from typing import Optional, TextIO, Tuple

from wordsearch.core.constants import (DEFAULT_ALPHABET, DEFAULT_COLS, DEFAULT_ROWS,
                                       PlacementStrategy, SessionStatus)
from wordsearch.data.catalog import (DEFAULT_CATALOG_PATH, HttpCatalogSource,
                                     JsonFileCatalogSource, WordCatalog)
from wordsearch.engine.session import PuzzleSession, SessionConfig
from wordsearch.io.store import (DEFAULT_STORE_DIR, JsonFileStore, StateStore, clear_session,
                                 load_session, load_settings, record_game_solved,
                                 record_game_started, save_session, save_settings)
from wordsearch.utils.logger import configure_logging
from wordsearch.utils.pretty import pretty_print_session, print_session_stats


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate and play word search puzzles")
    parser.add_argument("--rows", type=int, default=DEFAULT_ROWS, help="Grid height in cells")
    parser.add_argument("--cols", type=int, default=DEFAULT_COLS, help="Grid width in cells")
    parser.add_argument(
        "--set",
        dest="word_set",
        type=str,
        default=None,
        help="Word set name, or 'random' (default: saved setting)",
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        default=DEFAULT_CATALOG_PATH,
        help="Path to a words.json catalog",
    )
    parser.add_argument("--catalog-url", type=str, help="Fetch the catalog from this URL instead")
    parser.add_argument(
        "--strategy",
        type=str,
        choices=[s.value for s in PlacementStrategy],
        default=None,
        help="Placement strategy (default: saved setting)",
    )
    parser.add_argument("--alphabet", type=str, default=DEFAULT_ALPHABET, help="Noise/letter alphabet")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument(
        "--target-ratio",
        type=float,
        default=0.9,
        help="Fraction of words that must fit before a pass is accepted",
    )
    parser.add_argument("--max-passes", type=int, default=50, help="Hard limit on packing passes")
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument("--play", action="store_true", help="Play interactively in the terminal")
    parser.add_argument("--resume", action="store_true", help="Resume the saved game if there is one")
    parser.add_argument("--hard-mode", action="store_true", help="Hide the words still to find")
    parser.add_argument("--store-dir", type=Path, default=DEFAULT_STORE_DIR, help="Saved state directory")
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def parse_move(line: str) -> Optional[Tuple[Tuple[int, int], Tuple[int, int]]]:
    """Parse ``"r1 c1 r2 c2"`` (commas allowed) into start/end cells."""

    parts = line.replace(",", " ").split()
    if len(parts) != 4:
        return None
    try:
        r1, c1, r2, c2 = (int(part) for part in parts)
    except ValueError:
        return None
    return (r1, c1), (r2, c2)


def play(session: PuzzleSession, store: StateStore, *, hard_mode: bool = False,
         stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
    """Read moves until the puzzle is solved or input ends."""

    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    session.on_solved(lambda solved: record_game_solved(store, solved))
    pretty_print_session(session, hard_mode=hard_mode, stream=stdout)
    if session.is_solved:
        print("\nNo word fits this grid, nothing to find.", file=stdout)
        return
    print("\nEnter moves as 'row col row col' (q to quit).", file=stdout)
    for line in stdin:
        line = line.strip()
        if line.lower() in {"q", "quit", "exit"}:
            break
        move = parse_move(line)
        if move is None:
            print("Expected four numbers: start row, start col, end row, end col.", file=stdout)
            continue
        start, end = move
        if not (session.grid.bounds.contains(*start) and session.grid.bounds.contains(*end)):
            print("Both cells must be inside the grid.", file=stdout)
            continue
        session.begin_drag(start)
        result = session.release_drag(end)
        if result is None:
            print("Nothing selected.", file=stdout)
        elif result.matched:
            print(f"Found: {result.token.display_text}", file=stdout)
        elif result.already_found:
            print(f"'{result.word}' was already found.", file=stdout)
        else:
            print(f"'{result.word}' is not in the list.", file=stdout)
        save_session(store, session)
        if result is not None and result.matched:
            print(file=stdout)
            pretty_print_session(session, hard_mode=hard_mode, stream=stdout)
        if session.status == SessionStatus.SOLVED:
            print("\nCongratulations! You have found all the words!", file=stdout)
            clear_session(store)
            break


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.rows <= 0 or args.cols <= 0:
        parser.error("--rows and --cols must be positive")
    if not 0.0 < args.target_ratio <= 1.0:
        parser.error("--target-ratio must be in (0, 1]")
    if args.max_passes < 1:
        parser.error("--max-passes must be at least 1")

    store = JsonFileStore(args.store_dir)
    settings = load_settings(store)
    if args.word_set is not None:
        settings.word_set = args.word_set
    if args.strategy is not None:
        settings.strategy = PlacementStrategy(args.strategy)
    if args.hard_mode:
        settings.hard_mode = True
    save_settings(store, settings)

    rng = random.Random(args.seed)
    session = load_session(store, rng=rng) if args.resume else None
    if session is None:
        source = HttpCatalogSource(args.catalog_url) if args.catalog_url else JsonFileCatalogSource(args.catalog)
        catalog = WordCatalog(source, rng=rng)
        config = SessionConfig(
            rows=args.rows,
            cols=args.cols,
            alphabet=args.alphabet,
            strategy=settings.strategy,
            seed=args.seed,
            target_ratio=args.target_ratio,
            max_passes=args.max_passes,
            min_passes=min(5, args.max_passes),
        )
        session = PuzzleSession(catalog.pick(settings.word_set), config=config, rng=rng)
        session.prepare()
        record_game_started(store)
        save_session(store, session)

    if args.output:
        args.output.write_text(json.dumps(session.to_state(), ensure_ascii=False, indent=2), encoding="utf-8")

    if args.play:
        play(session, store, hard_mode=settings.hard_mode)
    else:
        pretty_print_session(session, hard_mode=settings.hard_mode)
        print_session_stats(session)


if __name__ == "__main__":  # pragma: no cover
    main()
