"""Command-line interface for menu-optimizer."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

from .analytics import AnalyticsService
from .config import LLMSettings, PipelineSettings
from .database import InMemoryDatabase
from .errors import MenuOptimizerError
from .llm import LLMService
from .optimization import OptimizationPipeline, get_optimization_options
from .shared.models import (
    OptimizeExistingItemsRequest,
    SelectedDemographics,
    SuggestNewItemsRequest,
)
from .utils import load_restaurant_bundles, populate_database, setup_logging

logger = logging.getLogger(__name__)


def _print_model(model: BaseModel) -> None:
    print(model.model_dump_json(indent=2))


def _prepare(args) -> None:
    """Set up logging and load the env file."""
    setup_logging(args.log_level.upper())
    did_load_env = load_dotenv(args.env_file)
    if did_load_env:
        logger.info(f"Loaded environment variables from env file at path: {args.env_file}")
    else:
        logger.debug(f"No environment variables loaded from env file at path: {args.env_file}")


async def _load_database(data_dir: Path) -> InMemoryDatabase:
    db = InMemoryDatabase()
    await populate_database(db, load_restaurant_bundles(data_dir))
    return db


async def run_score(data_dir: Path, restaurant_id: str) -> None:
    """Score every item of a restaurant and print the dashboard."""
    db = await _load_database(data_dir)
    service = AnalyticsService(db)
    await service.collect_restaurant_analytics(restaurant_id)
    _print_model(await service.get_dashboard_data(restaurant_id))


async def run_options(data_dir: Path, restaurant_id: str) -> None:
    """Print readiness and available workflows of a restaurant."""
    db = await _load_database(data_dir)
    _print_model(await get_optimization_options(db, restaurant_id))


async def run_optimize(data_dir: Path, request: OptimizeExistingItemsRequest) -> None:
    """Optimize existing items and print the batch result."""
    db = await _load_database(data_dir)
    llm = LLMService.from_settings(LLMSettings())
    try:
        pipeline = OptimizationPipeline(db, llm, PipelineSettings())
        _print_model(await pipeline.optimize_existing_items(request))
    finally:
        await llm.close()


async def run_suggest(data_dir: Path, request: SuggestNewItemsRequest) -> None:
    """Suggest new items and print the batch result."""
    db = await _load_database(data_dir)
    llm = LLMService.from_settings(LLMSettings())
    try:
        pipeline = OptimizationPipeline(db, llm, PipelineSettings())
        _print_model(await pipeline.suggest_new_items(request))
    finally:
        await llm.close()


def run_score_command(args):
    """Handle the score subcommand."""
    _prepare(args)
    asyncio.run(run_score(Path(args.data_dir), args.restaurant))


def run_options_command(args):
    """Handle the options subcommand."""
    _prepare(args)
    asyncio.run(run_options(Path(args.data_dir), args.restaurant))


def run_optimize_command(args):
    """Handle the optimize subcommand."""
    _prepare(args)
    request = OptimizeExistingItemsRequest(
        restaurant_id=args.restaurant,
        item_ids=args.item or None,
        selected_demographics=SelectedDemographics(
            selected_age_groups=args.age_group,
            selected_gender_groups=args.gender,
            selected_interests=args.interest,
        ),
        optimization_style=args.style,
        target_audience=args.audience,
        batch_size=args.batch_size,
    )
    asyncio.run(run_optimize(Path(args.data_dir), request))


def run_suggest_command(args):
    """Handle the suggest subcommand."""
    _prepare(args)
    request = SuggestNewItemsRequest(
        restaurant_id=args.restaurant,
        max_suggestions=args.max_suggestions,
        excluded_categories=args.exclude_category,
        cuisine_override=args.cuisine,
    )
    asyncio.run(run_suggest(Path(args.data_dir), request))


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "data_dir",
        type=str,
        help="Directory of restaurant YAML files",
    )
    parser.add_argument(
        "--restaurant",
        required=True,
        help="Restaurant id to work on",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help=".env file with environment variables to load (default: .env)",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="info",
        help="Logging level (default: info)",
    )


def main():
    """Run main CLI."""
    parser = argparse.ArgumentParser(
        prog="menu-optimizer",
        description="Menu optimizer - demographic rewrites, new dish suggestions and item scoring",
    )
    subparsers = parser.add_subparsers(
        dest="command", help="Available commands", required=True
    )

    score_parser = subparsers.add_parser(
        "score", help="Score menu items and print dashboard data"
    )
    score_parser.set_defaults(func=run_score_command)
    _add_common_arguments(score_parser)

    options_parser = subparsers.add_parser(
        "options", help="Show which optimization workflows are available"
    )
    options_parser.set_defaults(func=run_options_command)
    _add_common_arguments(options_parser)

    optimize_parser = subparsers.add_parser(
        "optimize", help="Rewrite existing items for selected demographics"
    )
    optimize_parser.set_defaults(func=run_optimize_command)
    _add_common_arguments(optimize_parser)
    optimize_parser.add_argument(
        "--item", action="append", default=[], help="Menu item id (repeatable)"
    )
    optimize_parser.add_argument(
        "--age-group", action="append", default=[], help="Age range, e.g. 25-34"
    )
    optimize_parser.add_argument(
        "--gender", action="append", default=[], help="Gender group"
    )
    optimize_parser.add_argument(
        "--interest", action="append", default=[], help="Customer interest"
    )
    optimize_parser.add_argument("--style", help="Writing style of the rewrite")
    optimize_parser.add_argument("--audience", help="Target audience")
    optimize_parser.add_argument(
        "--batch-size", type=int, help="Concurrent model calls per batch"
    )

    suggest_parser = subparsers.add_parser(
        "suggest", help="Suggest new items from peer specialty dishes"
    )
    suggest_parser.set_defaults(func=run_suggest_command)
    _add_common_arguments(suggest_parser)
    suggest_parser.add_argument(
        "--max-suggestions", type=int, help="Number of suggestions (default: 5)"
    )
    suggest_parser.add_argument(
        "--exclude-category",
        action="append",
        default=[],
        help="Category to leave out (repeatable)",
    )
    suggest_parser.add_argument("--cuisine", help="Cuisine to use in the prompt")

    args = parser.parse_args()

    try:
        args.func(args)
    except KeyboardInterrupt:
        print("\nExecution interrupted by user.")
        sys.exit(1)
    except (MenuOptimizerError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
