"""
Base data classes for emoji label conflict resolution.

These classes represent the core concepts:
- Proposal: One classifier result for one icon (from emoji-assignments.json)
- Candidate: A single claim on an emoji key, derived from a Proposal
- LabelConflict: When multiple candidates claim the same emoji key
- ResolutionResult: Final emoji -> icon mapping, tie records and statistics
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResolutionStrategy(Enum):
    """How an emoji key was resolved."""
    NO_CONFLICT = "no_conflict"                            # Single candidate
    PRIMARY_CONFIDENCE = "primary_confidence"              # Several primaries, highest similarity
    PRIMARY_OVER_ALTERNATIVE = "primary_over_alternative"  # One primary beats alternatives
    ALTERNATIVE_ORDER = "alternative_order"                # Alternatives only, lowest index
    MANUAL_OVERRIDE = "manual_override"                    # Forced by the tie-break file


class Proposal(BaseModel):
    """
    One classification result as stored in emoji-assignments.json.

    Example:
        {"filename": "document_add", "name": "Document Add",
         "metaphor": ["new file"], "emoji": "📄", "subEmoji": "➕",
         "alternativeEmojis": ["📃"], "similarity": 0.89}
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    filename: str = Field(..., min_length=1)
    name: str = ""
    metaphor: List[str] = Field(default_factory=list)
    emoji: str = ""
    sub_emoji: str = Field(default="", alias="subEmoji")
    alternative_emojis: List[str] = Field(default_factory=list, alias="alternativeEmojis")
    similarity: float = Field(..., ge=0.0, le=1.0)

    @field_validator("emoji", "sub_emoji", "name", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("metaphor", "alternative_emojis", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("similarity", mode="before")
    @classmethod
    def _reject_bool(cls, value: Any) -> Any:
        # JSON true/false would otherwise coerce to 1.0/0.0
        if isinstance(value, bool):
            raise ValueError("similarity must be a number, not a boolean")
        return value


@dataclass(frozen=True)
class Candidate:
    """A single claim on one emoji key."""
    filename: str
    similarity: float
    is_primary: bool
    alt_index: Optional[int] = None  # Position in alternativeEmojis (non-primary only)

    def describe(self) -> str:
        if self.is_primary:
            return f"{self.filename} (primary, similarity: {self.similarity})"
        return f"{self.filename} (alt #{self.alt_index}, similarity: {self.similarity})"


# emoji key -> candidates in proposal order
ConflictSets = Dict[str, List[Candidate]]


@dataclass
class CollectionResult:
    """Output of the candidate collector."""
    conflict_sets: ConflictSets
    proposal_count: int = 0
    primary_mappings: int = 0
    alternative_mappings: int = 0

    @property
    def total_mappings(self) -> int:
        return self.primary_mappings + self.alternative_mappings


@dataclass
class LabelConflict:
    """
    Represents several candidates claiming the same emoji key.

    Example:
        label: "➕"
        contenders: [Candidate("add", 0.9, True), Candidate("plus", 0.8, True)]
    """
    label: str
    contenders: List[Candidate]

    # Filled after resolution
    winner: Optional[str] = None
    resolution_strategy: ResolutionStrategy = ResolutionStrategy.NO_CONFLICT
    resolution_reason: str = ""

    @property
    def primaries(self) -> List[Candidate]:
        return [c for c in self.contenders if c.is_primary]

    @property
    def alternatives(self) -> List[Candidate]:
        return [c for c in self.contenders if not c.is_primary]

    @property
    def loser_filenames(self) -> List[str]:
        """Icons that lost this conflict."""
        if not self.winner:
            return []
        return [c.filename for c in self.contenders if c.filename != self.winner]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "winner": self.winner,
            "losers": self.loser_filenames,
            "resolution": self.resolution_strategy.value,
            "reason": self.resolution_reason,
        }


@dataclass
class MappingStats:
    """Counters reported in the summary and the output metadata."""
    proposals: int = 0
    total_mappings: int = 0
    primary_mappings: int = 0
    alternative_mappings: int = 0
    conflict_count: int = 0
    tie_count: int = 0
    primary_wins: int = 0
    alternative_wins: int = 0
    alternatives_discarded: int = 0
    manual_overrides: int = 0


@dataclass
class ResolutionResult:
    """
    Complete result of a resolution pass.

    ``mappings`` and ``ties`` keep the insertion order of the conflict sets;
    serializers impose their own ordering.
    """
    mappings: Dict[str, str]
    ties: Dict[str, List[str]]
    conflicts: List[LabelConflict] = field(default_factory=list)
    stats: MappingStats = field(default_factory=MappingStats)

    def get_conflict_summary(self) -> List[Dict[str, Any]]:
        """Get a summary of all conflicts for logging/debugging."""
        return [c.to_dict() for c in self.conflicts]
