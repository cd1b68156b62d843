"""
Emoji Key Conflict Resolvers.

This package turns classifier proposals into a unique emoji -> icon mapping
when several icons want the same emoji.

Usage:
    from emoji_mapper.resolvers import CandidateCollector, ConflictResolver

    collected = CandidateCollector().collect(proposals)
    result = ConflictResolver().resolve_collected(collected)

    print(result.mappings)   # Final mappings
    print(result.ties)       # Primary-vs-primary tie records
"""

from .base import (
    Candidate,
    CollectionResult,
    LabelConflict,
    MappingStats,
    Proposal,
    ResolutionResult,
    ResolutionStrategy,
)
from .collector import CandidateCollector, parse_proposals
from .conflict_resolver import ConflictResolver
from .overrides import ManualOverrideApplier, OverrideResult, parse_override_ties

__all__ = [
    # Data classes
    "Candidate",
    "CollectionResult",
    "LabelConflict",
    "MappingStats",
    "Proposal",
    "ResolutionResult",
    "ResolutionStrategy",
    "OverrideResult",
    # Stages
    "CandidateCollector",
    "ConflictResolver",
    "ManualOverrideApplier",
    # Helpers
    "parse_proposals",
    "parse_override_ties",
]
