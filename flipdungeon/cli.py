"""
Flip Dungeon CLI - Command-line interface for the engine.

Usage:
    flipdungeon serve                 Run the REST API
    flipdungeon simulate              Play games with a bot
    flipdungeon scores                Show the high score list
"""

import argparse
import logging
import sys


POLICIES = ("greedy", "random", "first")


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Flip Dungeon - Turn Resolution & Progression Engine",
        prog="flipdungeon",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Play games with a bot")
    simulate_parser.add_argument("--games", "-n", type=int, default=1, help="Number of games")
    simulate_parser.add_argument("--seed", type=int, default=None, help="Seed of the first game")
    simulate_parser.add_argument("--class", dest="character_class", default="Druid", help="Character class")
    simulate_parser.add_argument("--difficulty", default="Normal", help="Easy, Normal or Hard")
    simulate_parser.add_argument("--policy", choices=POLICIES, default="greedy", help="Bot policy")
    simulate_parser.add_argument("--save", action="store_true", help="Record results on the scoreboard")

    # Scores command
    scores_parser = subparsers.add_parser("scores", help="Show the high score list")
    scores_parser.add_argument("--clear", action="store_true", help="Delete all scores")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "scores":
        cmd_scores(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_serve(args):
    """Run the REST API with uvicorn."""
    import uvicorn
    from .api import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)


def make_policy(name: str, seed=None):
    from .bots import FirstLegalPolicy, GreedyPolicy, RandomPolicy

    if name == "random":
        return RandomPolicy(seed=seed)
    if name == "first":
        return FirstLegalPolicy()
    return GreedyPolicy()


def cmd_simulate(args):
    """Play games with a bot and print the results."""
    from .bots import play_game
    from .engine_core.scoring import high_score_entry
    from .games.flip_dungeon import DEFAULT_CATALOG, new_game
    from .scoreboard import HighScoreStore

    store = HighScoreStore() if args.save else None
    for i in range(args.games):
        seed = args.seed + i if args.seed is not None else None
        try:
            state = new_game(
                character_class=args.character_class,
                difficulty=args.difficulty,
                random_seed=seed,
            )
        except ValueError as e:
            print(f"Error: {e}")
            sys.exit(1)

        policy = make_policy(args.policy, seed)
        record = play_game(policy, state, DEFAULT_CATALOG)
        final = record.final_state
        print(
            f"{final.game_id}: {record.outcome} score={record.score} "
            f"round={final.round} steps={record.steps} "
            f"cleared={final.player.locations_cleared}"
        )
        if store is not None and record.finished:
            store.save(high_score_entry(final, f"{policy.get_name()} bot"))


def cmd_scores(args):
    """Show or clear the high score list."""
    from .scoreboard import HighScoreStore

    store = HighScoreStore()
    if args.clear:
        store.clear()
        print("Scores cleared")
        return

    entries = store.list()
    if not entries:
        print("No scores yet")
        return
    for rank, entry in enumerate(entries, 1):
        print(
            f"{rank:2d}. {entry.get('score', 0):5d}  {entry.get('player_name', '?')} "
            f"({entry.get('character_class', '?')}, {entry.get('difficulty', '?')}) "
            f"{entry.get('outcome', '')}"
        )


if __name__ == "__main__":
    main()
