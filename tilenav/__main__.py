"""Entry point: ``python -m tilenav``.

Supports two modes:
  - ``python -m tilenav``            → Launch the FastAPI server
  - ``python -m tilenav cli``        → Headless run writing a JSON trace
"""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)

_LOG_LEVELS = ["VERBOSE", "DEBUG", "INFO", "WARNING"]
_CATEGORY_LEVELS = _LOG_LEVELS + ["ERROR", "CRITICAL"]


def _add_world_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--level", type=str, default=None, help="ASCII level file")
    parser.add_argument("--generate", action="store_true", help="Use a generated level instead of the built-in one")
    parser.add_argument("--width", type=int, default=24)
    parser.add_argument("--height", type=int, default=16)
    parser.add_argument("--bfs-limit", type=int, default=20)
    parser.add_argument(
        "--category-level", action="append", default=[], metavar="CATEGORY=LEVEL",
        help="Per-category diagnostics threshold, e.g. graph=WARNING (repeatable)",
    )
    parser.add_argument("--log-level", type=str, default="INFO", choices=_LOG_LEVELS)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tile navigation engine")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    _add_world_args(srv)

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run headless and write a JSON trace")
    cli.add_argument("--ticks", type=int, default=400)
    cli.add_argument("--trace", type=str, default="trace.json")
    _add_world_args(cli)

    return parser


def _parse_category_levels(parser: argparse.ArgumentParser, pairs: list[str]) -> tuple[tuple[str, str], ...]:
    from tilenav.core.enums import LogCategory

    categories = [c.value for c in LogCategory]
    levels = []
    for pair in pairs:
        category, sep, level = pair.partition("=")
        category, level = category.strip().lower(), level.strip().upper()
        if not sep:
            parser.error(f"--category-level expects CATEGORY=LEVEL, got {pair!r}")
        if category not in categories:
            parser.error(f"unknown log category {category!r} (choose from {', '.join(categories)})")
        if level not in _CATEGORY_LEVELS:
            parser.error(f"unknown log level {level!r} for category {category!r} (choose from {', '.join(_CATEGORY_LEVELS)})")
        levels.append((category, level))
    return tuple(levels)


def _config_from_args(parser: argparse.ArgumentParser, args: argparse.Namespace, **overrides):
    from tilenav.config import NavigationConfig

    return NavigationConfig(
        world_seed=args.seed,
        level_file=args.level,
        generate_level=args.generate,
        grid_width=args.width,
        grid_height=args.height,
        bfs_limit=args.bfs_limit,
        category_levels=_parse_category_levels(parser, args.category_level),
        log_level=args.log_level,
        **overrides,
    )


def _run_server(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    import uvicorn

    from tilenav.api.app import create_app

    config = _config_from_args(parser, args)
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level="debug" if args.log_level == "VERBOSE" else args.log_level.lower())


def _run_cli(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    from tilenav.engine.world_loop import build_world
    from tilenav.utils.logging import setup_logging
    from tilenav.utils.replay import TraceRecorder

    config = _config_from_args(parser, args, max_ticks=args.ticks, trace_file=args.trace)
    setup_logging(config.log_level)

    level_name = config.level_file or ("generated" if config.generate_level else "default")
    recorder = TraceRecorder(config.trace_file, config.world_seed, level_name)
    loop = build_world(config, recorder=recorder)
    loop.run()

    for agent in loop.agents:
        logger.info("%s finished in %s at %s", agent.actor.name, agent.state_name, agent.actor.position)
    logger.info("Done. Trace written to %s", config.trace_file)


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(parser, args)
    elif args.command == "cli":
        _run_cli(parser, args)


if __name__ == "__main__":
    main()
