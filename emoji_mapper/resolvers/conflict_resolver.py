"""
Emoji Key Conflict Resolver.

Runs AFTER all candidates are collected to pick exactly one icon per emoji
key.

Priority policy:
1. Primary candidates always beat non-primary (alternative) candidates
2. Among several primaries, the highest similarity wins; equal similarities
   keep proposal order (stable sort)
3. Among alternatives only, the lowest alternative index wins

Only primary-vs-primary conflicts produce tie records for manual review.
"""

from typing import Dict, List, Optional

from emoji_mapper.build_log import BuildLog
from emoji_mapper.resolvers.base import (
    Candidate,
    CollectionResult,
    ConflictSets,
    LabelConflict,
    MappingStats,
    ResolutionResult,
    ResolutionStrategy,
)


class ConflictResolver:
    """
    Emoji key conflict resolver.

    Usage:
        resolver = ConflictResolver()
        result = resolver.resolve(collected.conflict_sets)

        print(result.mappings)   # {"➕": "add", ...}
        print(result.ties)       # {"➕": ["add", "plus"], ...}
    """

    def __init__(self, build_log: Optional[BuildLog] = None):
        self.build_log = build_log or BuildLog()

    def resolve(
        self,
        conflict_sets: ConflictSets,
        stats: Optional[MappingStats] = None,
    ) -> ResolutionResult:
        """
        Main entry point: resolve every emoji key.

        Args:
            conflict_sets: emoji key -> candidates in proposal order
            stats: Optional stats to continue filling (e.g. collector counts)

        Returns:
            ResolutionResult with final mappings, tie records and conflicts
        """
        stats = stats or MappingStats()
        mappings: Dict[str, str] = {}
        ties: Dict[str, List[str]] = {}
        conflicts: List[LabelConflict] = []

        self.build_log.info("Resolving conflicts and creating final mappings...")

        for label, candidates in conflict_sets.items():
            if len(candidates) == 1:
                # No conflict, simple assignment
                candidate = candidates[0]
                mappings[label] = candidate.filename
                if candidate.is_primary:
                    stats.primary_wins += 1
                else:
                    stats.alternative_wins += 1
                continue

            stats.conflict_count += 1
            conflict = LabelConflict(label=label, contenders=list(candidates))
            tie = self._pick_winner(conflict, stats)

            mappings[label] = conflict.winner
            if tie is not None:
                ties[label] = tie
                stats.tie_count += 1

            conflicts.append(conflict)

        self.build_log.info(
            f"Resolved {stats.conflict_count} conflicts, created {stats.tie_count} tie records"
        )
        self.build_log.info(f"  - Primary emoji wins: {stats.primary_wins}")
        self.build_log.info(f"  - Alternative emoji wins: {stats.alternative_wins}")
        self.build_log.info(f"  - Alternative emojis discarded: {stats.alternatives_discarded}")

        return ResolutionResult(
            mappings=mappings,
            ties=ties,
            conflicts=conflicts,
            stats=stats,
        )

    def resolve_collected(self, collected: CollectionResult) -> ResolutionResult:
        """Resolve a collector result, carrying its counters into the stats."""
        stats = MappingStats(
            proposals=collected.proposal_count,
            total_mappings=collected.total_mappings,
            primary_mappings=collected.primary_mappings,
            alternative_mappings=collected.alternative_mappings,
        )
        return self.resolve(collected.conflict_sets, stats=stats)

    def _pick_winner(
        self,
        conflict: LabelConflict,
        stats: MappingStats,
    ) -> Optional[List[str]]:
        """
        Decide the winner of a conflict with two or more candidates.

        Sets ``conflict.winner`` and returns the tie record, or None when the
        conflict is not primary-vs-primary.
        """
        primaries = conflict.primaries
        alternatives = conflict.alternatives

        if len(primaries) > 1:
            # sorted() is stable: equal similarities keep proposal order
            ranked = sorted(primaries, key=lambda c: c.similarity, reverse=True)
            winner = ranked[0]
            stats.primary_wins += 1

            conflict.winner = winner.filename
            conflict.resolution_strategy = ResolutionStrategy.PRIMARY_CONFIDENCE
            conflict.resolution_reason = (
                f"{winner.describe()} beats {len(primaries) - 1} other primary "
                f"+ {len(alternatives)} alternative(s)"
            )
            self.build_log.info(
                f"Primary conflict resolved for {conflict.label}: {conflict.resolution_reason}"
            )
            return [c.filename for c in ranked]

        if len(primaries) == 1:
            winner = primaries[0]
            stats.primary_wins += 1
            stats.alternatives_discarded += len(alternatives)

            conflict.winner = winner.filename
            conflict.resolution_strategy = ResolutionStrategy.PRIMARY_OVER_ALTERNATIVE
            conflict.resolution_reason = (
                f"{winner.describe()} beats {len(alternatives)} alternative(s)"
            )
            self.build_log.info(
                f"Primary beats alternative for {conflict.label}: {conflict.resolution_reason}"
            )
            return None

        ranked = sorted(alternatives, key=self._alt_order)
        winner = ranked[0]
        stats.alternative_wins += 1
        stats.alternatives_discarded += len(alternatives) - 1

        conflict.winner = winner.filename
        conflict.resolution_strategy = ResolutionStrategy.ALTERNATIVE_ORDER
        conflict.resolution_reason = (
            f"{winner.describe()} beats {len(alternatives) - 1} other alternative(s)"
        )
        self.build_log.info(
            f"Alternative conflict resolved for {conflict.label}: {conflict.resolution_reason}"
        )
        return None

    @staticmethod
    def _alt_order(candidate: Candidate) -> int:
        return candidate.alt_index or 0
