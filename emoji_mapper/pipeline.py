"""
Emoji mapping pipeline.

    emoji-assignments.json
        -> CandidateCollector     (conflict sets per emoji)
        -> ConflictResolver       (one icon per emoji + tie records)
        -> ManualOverrideApplier  (curator overrides)
        -> MappingSerializer      (three sorted output files)

Everything between reading the input and writing the outputs happens in
memory, in one pass.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from emoji_mapper.build_log import BuildLog
from emoji_mapper.core.config import Settings
from emoji_mapper.resolvers import (
    CandidateCollector,
    ConflictResolver,
    ManualOverrideApplier,
    OverrideResult,
    ResolutionResult,
    parse_proposals,
)
from emoji_mapper.serializers import MappingSerializer, MappingViews, OutputPaths
from emoji_mapper.storage import AssignmentsStore


@dataclass
class MappingRun:
    """Everything a mapping run produced."""
    result: ResolutionResult
    overrides: OverrideResult
    views: MappingViews
    paths: Optional[OutputPaths] = None


class EmojiMappingPipeline:
    """
    Runs the full mapping pass for one set of settings.

    Usage:
        pipeline = EmojiMappingPipeline(settings, build_log)
        run = pipeline.run()
        pipeline.log_summary(run)
    """

    def __init__(
        self,
        settings: Settings,
        build_log: Optional[BuildLog] = None,
        generated: Optional[str] = None,
    ):
        self.settings = settings
        self.build_log = build_log or BuildLog()
        self.store = AssignmentsStore(self.build_log)
        self.collector = CandidateCollector(
            consider_alternatives=settings.consider_alternatives,
            build_log=self.build_log,
        )
        self.resolver = ConflictResolver(self.build_log)
        self.override_applier = ManualOverrideApplier(self.build_log)
        self.serializer = MappingSerializer(generated=generated, build_log=self.build_log)

    def resolve(self, records: Any, overrides: Optional[Any] = None) -> MappingRun:
        """Run the in-memory stages on already loaded data."""
        proposals = parse_proposals(records, self.build_log)

        self.build_log.info("Processing emoji assignments...")
        collected = self.collector.collect(proposals)
        result = self.resolver.resolve_collected(collected)

        override_result = self.override_applier.apply(
            result.mappings, result.ties, overrides, result.conflicts
        )
        result.stats.manual_overrides = override_result.applied

        views = self.serializer.build_views(result.mappings, result.ties, result.stats)
        return MappingRun(result=result, overrides=override_result, views=views)

    def run(self, overrides_path: Optional[Path] = None) -> MappingRun:
        """
        Read the inputs, resolve, and write the three output artifacts.

        Raises:
            InputArtifactError: bad or missing emoji-assignments.json
            OutputWriteError: an output artifact could not be written
        """
        assignments = self.store.load_assignments(self.settings.assignments_path)
        overrides = self.store.load_overrides(overrides_path or self.settings.overrides_path)

        run = self.resolve(assignments.assignments, overrides)
        run.result.stats.proposals = assignments.total

        run.paths = OutputPaths.from_settings(self.settings)
        self.serializer.write(run.views, run.paths)
        return run

    def log_summary(self, run: MappingRun) -> None:
        stats = run.result.stats
        log = self.build_log.info

        log("=== SUMMARY ===")
        log(f"Total assignments processed: {stats.proposals}")
        log(f"Total emoji mappings created: {stats.total_mappings}")
        log(f"  - Primary mappings: {stats.primary_mappings}")
        log(f"  - Alternative mappings: {stats.alternative_mappings}")
        log(f"Conflicts resolved: {stats.conflict_count}")
        log(f"  - Primary emoji wins: {stats.primary_wins}")
        log(f"  - Alternative emoji wins: {stats.alternative_wins}")
        log(f"  - Alternative emojis discarded: {stats.alternatives_discarded}")
        log(f"Manual overrides applied: {stats.manual_overrides}")
        log(f"Final emoji-to-icon mappings: {len(run.result.mappings)}")
        if run.paths is not None:
            log(f"Output files created: {len(run.paths.as_list())}")
            log(f"  - {run.paths.mapping.name}: sorted by icon name")
            log(f"  - {run.paths.mapping_by_emoji.name}: sorted by emoji key")
            log(f"  - {run.paths.ties.name}: sorted by emoji length then alphabetically")
        log(f"Emoji ties recorded: {stats.tie_count} (primary conflicts only)")
        log("=== END SUMMARY ===")
