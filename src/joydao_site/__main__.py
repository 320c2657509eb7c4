# ABOUTME: CLI entry point for the JOYDAO.Z site backend.
# ABOUTME: Provides subcommands: serve, seed, migrate, status.

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import structlog

from joydao_site.config import Settings, get_settings

MIGRATIONS_DIR = Path(__file__).parent / "db" / "migrations"


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog for console or JSON output."""
    settings = settings or get_settings()

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
        timestamper = structlog.processors.TimeStamper(fmt="iso")
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)
        timestamper = structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S")

    structlog.configure(
        processors=[
            timestamper,
            structlog.processors.add_log_level,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the API server with uvicorn."""
    import uvicorn

    from joydao_site.web.app import create_app

    settings = get_settings()
    host = args.host or settings.host
    port = args.port or settings.port

    log = structlog.get_logger()
    log.info("cmd_serve_start", host=host, port=port)

    uvicorn.run(create_app(settings), host=host, port=port, log_level=settings.log_level.lower())
    return 0


async def _seed(settings: Settings) -> int:
    from joydao_site.seed import seed_posts
    from joydao_site.services import BlogService
    from joydao_site.store import create_store, open_store

    store = await open_store(create_store(settings), settings)
    try:
        return await seed_posts(BlogService(store))
    finally:
        await store.close()


def cmd_seed(_args: argparse.Namespace) -> int:
    """Insert the sample published posts.

    Against the in-memory store the posts vanish when the command exits.
    """
    log = structlog.get_logger()
    log.info("cmd_seed_start")

    settings = get_settings()
    if settings.use_memory_store:
        log.warning("seed_memory_store", hint="Set DATABASE_URL to persist seeded posts")

    try:
        created = asyncio.run(_seed(settings))
        log.info("cmd_seed_complete", created=created)
        return 0

    except Exception:
        log.exception("cmd_seed_failed")
        return 1


def cmd_migrate(args: argparse.Namespace) -> int:
    """Apply Alembic migrations up to ``args.revision``."""
    from alembic import command
    from alembic.config import Config

    log = structlog.get_logger()
    settings = get_settings()

    if not settings.database_url:
        log.error("cmd_migrate_no_database", hint="Set DATABASE_URL")
        return 1

    log.info("cmd_migrate_start", revision=args.revision)

    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    cfg.set_main_option("sqlalchemy.url", settings.database_url_sync)

    try:
        command.upgrade(cfg, args.revision)
        log.info("cmd_migrate_complete", revision=args.revision)
        return 0

    except Exception:
        log.exception("cmd_migrate_failed")
        return 1


def cmd_status(_args: argparse.Namespace) -> int:
    """Show which store the server would use."""
    settings = get_settings()

    print("\n=== JOYDAO.Z Status ===\n")
    print(f"Environment: {settings.environment}")
    print(f"Store: {'memory' if settings.use_memory_store else 'sql'}")
    if not settings.use_memory_store:
        print(f"Database: {settings.database_url.split('@')[-1]}")
    print(f"Owner configured: {'yes' if settings.owner_open_id else 'no'}")
    print(f"Bind: {settings.host}:{settings.port}")
    print()

    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="joydao_site",
        description="JOYDAO.Z - portfolio site backend",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the API server",
    )
    serve_parser.add_argument(
        "--host",
        type=str,
        help="Bind address. Defaults to HOST setting.",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        help="Bind port. Defaults to PORT setting.",
    )

    # seed command
    subparsers.add_parser(
        "seed",
        help="Insert the sample blog posts",
    )

    # migrate command
    migrate_parser = subparsers.add_parser(
        "migrate",
        help="Apply database migrations",
    )
    migrate_parser.add_argument(
        "--revision",
        type=str,
        default="head",
        help="Target revision (default: head)",
    )

    # status command
    subparsers.add_parser(
        "status",
        help="Show selected store and configuration",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    configure_logging()

    parser = create_parser()
    args = parser.parse_args(argv)

    commands = {
        "serve": cmd_serve,
        "seed": cmd_seed,
        "migrate": cmd_migrate,
        "status": cmd_status,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
