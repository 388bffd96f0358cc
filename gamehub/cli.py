"""
GameHub CLI - Command-line interface for the engine.

Usage:
    gamehub catalog [--search Q] [--category C] [--featured]
    gamehub play <game_type> [--variant V] [--seed N] [--option k=v ...]
    gamehub scores
    gamehub serve [--host H] [--port P]

While playing, type one command per line:
    a / d / w / s, left / right / up / down   directional input
    p (pause), r (reset), start, h (highlight)
    select <row> <col>        click a cell
    place <piece> <row> <col> drop a jigsaw piece on a slot
    tick <ms>                 advance the game clock
    speed <n>                 change snake speed
    quit
"""

import argparse
import os
import sys
from pathlib import Path

from .catalog import load_catalog, search_catalog
from .engine_core.action import Action
from .engine_core.input_map import action_for_key
from .render import TextRenderer
from .session import SessionManager, GameLoop
from .storage import HighScoreStore


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="GameHub - Minigame engines with a catalog portal",
        prog="gamehub",
    )
    parser.add_argument(
        "--data-dir",
        default=os.getenv("GAMEHUB_DATA_DIR"),
        help="Directory for highscores.json (default ~/.gamehub)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Catalog command
    catalog_parser = subparsers.add_parser("catalog", help="List games in the catalog")
    catalog_parser.add_argument("--search", "-s", help="Title search")
    catalog_parser.add_argument("--category", "-c", help="Only this category")
    catalog_parser.add_argument("--featured", action="store_true", help="Only featured games")
    catalog_parser.add_argument(
        "--file", default=os.getenv("GAMEHUB_CATALOG"), help="Catalog JSON file",
    )

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a game in the terminal")
    play_parser.add_argument("game_type", help="tetris, snake, 2048, chain_reaction, jigsaw, schulte")
    play_parser.add_argument("--variant", "-v", help="Game variant")
    play_parser.add_argument("--seed", type=int, help="Seed for a reproducible game")
    play_parser.add_argument(
        "--option", "-o", action="append", default=[], metavar="KEY=VALUE",
        help="Game option, e.g. grid_size=6 (repeatable)",
    )

    # Scores command
    subparsers.add_parser("scores", help="Show stored high scores")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    args = parser.parse_args(argv)

    if args.command == "catalog":
        cmd_catalog(args)
    elif args.command == "play":
        cmd_play(args)
    elif args.command == "scores":
        cmd_scores(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def _store(args) -> HighScoreStore:
    if args.data_dir:
        return HighScoreStore(Path(args.data_dir) / "highscores.json")
    return HighScoreStore()


def parse_options(pairs: list[str]) -> dict[str, object]:
    """Parse KEY=VALUE pairs; integer values become ints."""
    options = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Options look like key=value, got {pair!r}")
        options[key.strip()] = int(value) if value.strip().lstrip("-").isdigit() else value.strip()
    return options


def cmd_catalog(args):
    """Print catalog records."""
    records = load_catalog(args.file)
    results = search_catalog(
        records,
        query=args.search,
        category=args.category,
        featured_only=args.featured,
        featured_first=True,
    )
    if not results:
        print("No games found.")
        return
    for record in results:
        star = "*" if record.featured else " "
        engine = f"{record.game_type}/{record.variant}" if record.playable else "-"
        print(f"{star} {record.id:>3}  {record.title:<20} {record.category:<15} {engine}")


def cmd_scores(args):
    """Print stored high scores."""
    scores = _store(args).all()
    if not scores:
        print("No high scores yet.")
        return
    width = max(len(key) for key in scores)
    for key in sorted(scores):
        print(f"{key:<{width}}  {scores[key]}")


def cmd_serve(args):
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("gamehub.api.app:app", host=args.host, port=args.port, reload=args.reload)


def cmd_play(args):
    """Interactive text play loop."""
    try:
        options = parse_options(args.option)
        manager = SessionManager(high_scores=_store(args))
        session = manager.create_session(
            args.game_type, variant=args.variant, options=options, seed=args.seed,
        )
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    loop = GameLoop(session)
    renderer = TextRenderer()

    print(f"{session.rules.get_name()} ({session.variant}) - seed {session.seed}")
    if session.high_score is not None:
        print(f"Best: {session.high_score}")
    print(renderer.render(session.state))

    for line in sys.stdin:
        command = line.strip()
        if not command:
            continue
        if command in {"q", "quit", "exit"}:
            break

        try:
            result = run_command(loop, command)
        except ValueError as e:
            print(f"Error: {e}")
            continue

        if not result.success:
            print(f"Error: {result.error}")
            continue
        for event in result.events:
            print(f"> {event}")
        if result.new_high_score:
            print(f"> New best: {session.high_score}")
        print(renderer.render(session.state))

    manager.end_session(session.session_id, reason="user_ended")


def run_command(loop: GameLoop, command: str):
    """Apply one typed command to the loop."""
    parts = command.split()
    name = parts[0].lower()
    game_type = loop.session.game_type

    try:
        if name == "tick":
            return loop.advance(int(parts[1]) if len(parts) > 1 else 1000)
        if name == "select":
            return loop.dispatch(Action.select(int(parts[1]), int(parts[2])))
        if name == "place":
            return loop.dispatch(Action.place(int(parts[1]) - 1, int(parts[2]), int(parts[3])))
        if name == "speed":
            return loop.dispatch(Action.set_speed(int(parts[1])))
    except (IndexError, ValueError):
        raise ValueError(f"Could not read {command!r}")

    action = action_for_key(game_type, parts[0]) or action_for_key(game_type, name)
    if action is None:
        raise ValueError(f"Unknown command {command!r}")
    return loop.dispatch(action)


if __name__ == "__main__":
    main()
