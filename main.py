import argparse
import asyncio
import logging
import sys

from core.app_context import AppContext
from core.config_loader import load_config
from core.readiness import TransitionNotFoundError
from database.init_db import init_db

logger = logging.getLogger(__name__)


def configure_logging(level: str, fmt: str) -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=fmt)


def run_command(ctx: AppContext, args) -> int:
    if args.command == 'init-db':
        init_db(ctx.engine)
        return 0

    if args.command == 'collect':
        added = asyncio.run(ctx.insight_collector.collect(args.transition_id))
        print(f"Stored {added} new insights for transition {args.transition_id}")
        return 0

    if args.command == 'generate':
        score = asyncio.run(ctx.scoring_service.generate_readiness_score(args.transition_id))
        print(score.model_dump_json(indent=2))
        return 0

    if args.command == 'show':
        score = asyncio.run(ctx.scoring_service.get_readiness_score(args.transition_id))
        if score is None:
            print(f"No readiness score for transition {args.transition_id}")
            return 1
        print(score.model_dump_json(indent=2))
        return 0

    if args.command == 'purge-cache':
        removed = ctx.cache.purge_expired()
        print(f"Removed {removed} expired cache entries")
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Career transition readiness scoring")
    parser.add_argument('--config', type=str, default='config.yaml', help='Path to config.yaml')

    sub = parser.add_subparsers(dest='command', required=True)
    sub.add_parser('init-db', help='Create database tables')
    for name, help_text in (
        ('collect', 'Fetch forum stories and trend articles into stored insights'),
        ('generate', 'Generate (or regenerate) the readiness score'),
        ('show', 'Print the latest stored readiness score'),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument('transition_id', type=int)
    sub.add_parser('purge-cache', help='Delete expired provider cache entries')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    configure_logging(config.logging.level, config.logging.format)

    ctx = AppContext.build(config)
    try:
        return run_command(ctx, args)
    except TransitionNotFoundError as e:
        logger.error(str(e))
        return 1
    finally:
        ctx.close()


if __name__ == "__main__":
    sys.exit(main())
