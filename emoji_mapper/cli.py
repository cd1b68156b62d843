#!/usr/bin/env python3
"""
Emoji Mapper - build the emoji -> icon mapping from classifier output.

Usage:
    # Resolve conflicts and write the three mapping files
    python -m emoji_mapper.cli map

    # Same, with alternative emojis as fallback candidates
    python -m emoji_mapper.cli map --consider-alternatives

    # Merge per-group classifier results into emoji-assignments.json
    python -m emoji_mapper.cli aggregate

    # Show how icons would be grouped for classification
    python -m emoji_mapper.cli group --icons pngs/
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from emoji_mapper.build_log import BuildLog
from emoji_mapper.core.config import Settings, load_settings
from emoji_mapper.exceptions import ConfigError, EmojiMapperError
from emoji_mapper.grouping import group_icon_sets, list_icon_files, save_groups
from emoji_mapper.pipeline import EmojiMappingPipeline
from emoji_mapper.storage import AssignmentsStore


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_settings(args: argparse.Namespace) -> Settings:
    """Settings from the config file/environment, with CLI flags on top."""
    settings = load_settings(args.config)

    updates: Dict[str, Any] = {}
    if args.work_dir:
        updates["work_dir"] = Path(args.work_dir)
    if args.log_dir:
        updates["log_dir"] = Path(args.log_dir)
    if getattr(args, "consider_alternatives", False):
        updates["consider_alternatives"] = True

    return settings.model_copy(update=updates) if updates else settings


def run_map(args: argparse.Namespace, settings: Settings, build_log: BuildLog) -> int:
    pipeline = EmojiMappingPipeline(settings, build_log)
    overrides_path = Path(args.overrides) if args.overrides else None

    run = pipeline.run(overrides_path=overrides_path)
    pipeline.log_summary(run)
    return 0


def run_aggregate(args: argparse.Namespace, settings: Settings, build_log: BuildLog) -> int:
    store = AssignmentsStore(build_log)
    total = store.aggregate_groups(settings.groups_path, settings.assignments_path)
    print(f"Results saved to: {settings.assignments_path} ({total} assignments)")
    return 0


def run_group(args: argparse.Namespace, settings: Settings, build_log: BuildLog) -> int:
    icons = list_icon_files(args.icons)
    if not icons:
        build_log.error(f"No PNG files found in {args.icons}")
        return 1

    groups = group_icon_sets(
        icons,
        max_group_size=settings.max_group_size,
        min_subgroup_size=settings.min_subgroup_size,
        max_extras_group_size=settings.max_extras_group_size,
    )
    groups_file = save_groups(groups, settings.log_dir / "icon-groups.json")

    pending, existing = AssignmentsStore(build_log).pending_groups(groups, settings.groups_path)
    pending_icons = sum(len(g.files) for g in pending)
    existing_icons = sum(len(g["assignments"]) for g in existing)

    build_log.info(f"Found {len(icons)} PNG files total, grouped into {len(groups)} groups")
    build_log.info(f"{len(existing)} groups already processed ({existing_icons} icons)")
    build_log.info(f"{len(pending)} groups pending ({pending_icons} icons)")
    build_log.info(f"Groups written to: {groups_file}")
    return 0


COMMANDS = {
    "map": (run_map, "emoji-mapping"),
    "aggregate": (run_aggregate, "emoji-aggregation"),
    "group": (run_group, "icon-grouping"),
}


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build the emoji -> icon mapping from classifier output",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m emoji_mapper.cli map
    python -m emoji_mapper.cli map --overrides my-ties.json
    python -m emoji_mapper.cli aggregate --work-dir scripts/icon-to-emoji-llm
    python -m emoji_mapper.cli group --icons pngs/
        """,
    )
    parser.add_argument("--config", "-c", help="YAML settings file")
    parser.add_argument("--work-dir", "-w", help="Directory holding the JSON artifacts")
    parser.add_argument("--log-dir", help="Directory for build logs")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", required=True)

    map_parser = subparsers.add_parser("map", help="Resolve conflicts and write mapping files")
    map_parser.add_argument(
        "--consider-alternatives",
        action="store_true",
        help="Use alternative emojis as fallback candidates",
    )
    map_parser.add_argument("--overrides", help="Manual tie-break file (default from settings)")

    subparsers.add_parser("aggregate", help="Merge group results into the assignments file")

    group_parser = subparsers.add_parser("group", help="Group icon files for classification")
    group_parser.add_argument("--icons", default="pngs", help="Directory with PNG files")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    handler, log_name = COMMANDS[args.command]
    build_log = BuildLog(logger_name=f"emoji_mapper.{args.command}")

    try:
        settings = build_settings(args)
    except (ConfigError, ValueError) as e:
        # pydantic's ValidationError is a ValueError
        build_log.error("Invalid settings", e)
        build_log.save(log_name, Path(args.log_dir or "scripts/build-logs"))
        return 1

    try:
        exit_code = handler(args, settings, build_log)
    except EmojiMapperError as e:
        build_log.error("Script failed", e)
        exit_code = e.exit_code
    finally:
        build_log.save(log_name, settings.log_dir)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
