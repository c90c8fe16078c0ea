"""
Take Six CLI - Command-line interface for the game.

Usage:
    takesix serve [--host H] [--port P]      Serve the HTTP/WebSocket API
    takesix console                          Play against three autoplay seats
    takesix simulate [--matches N]           Autoplay whole matches and print results

Common options: --timeout, --policy, --seed, --log-level
"""

import argparse
import asyncio
import logging
import random
import sys

from .bots.policy import POLICIES
from .config import GameConfig


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Take Six - Penalty card game server",
        prog="takesix",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    parser.add_argument("--timeout", type=float, help="Seconds a participant has to answer")
    parser.add_argument(
        "--policy",
        choices=sorted(POLICIES),
        default="random",
        help="Autoplay policy for unattended seats",
    )
    parser.add_argument("--seed", type=int, help="Seed for shuffling and autoplay")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Serve the HTTP/WebSocket API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    # Console command
    subparsers.add_parser("console", help="Play from the terminal")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Autoplay whole matches")
    simulate_parser.add_argument("--matches", type=int, default=1, help="Number of matches")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "console":
        cmd_console(args)
    elif args.command == "simulate":
        cmd_simulate(args)
    else:
        parser.print_help()
        sys.exit(1)


def build_service(args, backends=None):
    """GameService from the environment plus command-line overrides."""
    from .api.service import GameService, default_backends

    config = GameConfig.from_env()
    if args.timeout is not None:
        config = GameConfig(
            player_count=config.player_count,
            max_cow_count=config.max_cow_count,
            prompt_timeout=args.timeout,
        )

    return GameService(
        config=config,
        policy=POLICIES[args.policy](args.seed),
        backends=backends if backends is not None else default_backends(),
        rng=random.Random(args.seed) if args.seed is not None else None,
    )


def cmd_serve(args):
    """Serve the API with uvicorn."""
    import uvicorn
    from .api.app import create_app

    app = create_app(build_service(args))
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def cmd_console(args):
    """Play one seat from this terminal."""
    from .backends import ConsoleBackend

    service = build_service(args, backends=[ConsoleBackend()])

    async def play():
        await service.start(run_match=False)
        try:
            return await service.match_loop.run()
        finally:
            await service.stop()

    try:
        results = asyncio.run(play())
    except KeyboardInterrupt:
        print("\nBye")
        sys.exit(130)

    print(f"Played {len(results)} match(es)")


def cmd_simulate(args):
    """Autoplay matches and print the standings."""
    service = build_service(args, backends=[])
    results = asyncio.run(service.simulate(args.matches))

    for result in results:
        print(f"Match {result.match_number}: {result.rounds_played} round(s)")
        for standing in result.standings:
            print(f"  {standing.position}. {standing.name}: {standing.cow_count} cows")
        print(f"  Loser: {result.loser.name}")


if __name__ == "__main__":
    main()
