"""
Candidate collection.

Expands each Proposal into the emoji keys it claims and groups the claims
into conflict sets keyed by emoji string.
"""

from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from emoji_mapper.build_log import BuildLog
from emoji_mapper.exceptions import InvalidProposalError
from emoji_mapper.resolvers.base import Candidate, CollectionResult, Proposal


def parse_proposals(
    records: Sequence[Any],
    build_log: Optional[BuildLog] = None,
) -> List[Proposal]:
    """
    Validate raw assignment records.

    A record without a ``filename`` makes the whole input untrusted and raises
    InvalidProposalError. Any other malformed record is logged and skipped.
    """
    build_log = build_log or BuildLog()
    proposals: List[Proposal] = []

    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise InvalidProposalError(index, f"expected an object, got {type(record).__name__}")

        filename = record.get("filename")
        if not isinstance(filename, str) or not filename:
            raise InvalidProposalError(index)

        try:
            proposals.append(Proposal.model_validate(record))
        except ValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            build_log.warning(f"Skipping malformed assignment for {filename}: invalid {fields}")

    return proposals


class CandidateCollector:
    """
    Builds conflict sets from proposals.

    Every proposal claims its ``emoji`` and, when a sub-emoji is present,
    the ``emoji + subEmoji`` combination. Both are primary claims.
    Alternative emojis become non-primary claims only when
    ``consider_alternatives`` is enabled.

    Usage:
        collector = CandidateCollector()
        collected = collector.collect(proposals)
        collected.conflict_sets["➕"]  # [Candidate(...), ...]
    """

    def __init__(
        self,
        consider_alternatives: bool = False,
        build_log: Optional[BuildLog] = None,
    ):
        self.consider_alternatives = consider_alternatives
        self.build_log = build_log or BuildLog()

    def collect(self, proposals: Iterable[Proposal]) -> CollectionResult:
        """Collect candidates from proposals, preserving proposal order."""
        conflict_sets: Dict[str, List[Candidate]] = defaultdict(list)
        result = CollectionResult(conflict_sets={})

        for index, proposal in enumerate(proposals):
            if not proposal.filename:
                raise InvalidProposalError(index)

            for key, candidate in self._expand(proposal):
                conflict_sets[key].append(candidate)
                if candidate.is_primary:
                    result.primary_mappings += 1
                else:
                    result.alternative_mappings += 1

            result.proposal_count += 1

        result.conflict_sets = dict(conflict_sets)

        self.build_log.info(
            f"Created {result.total_mappings} emoji mappings from {result.proposal_count} assignments"
        )
        self.build_log.info(
            f"  - Primary mappings (emoji + emoji+subEmoji): {result.primary_mappings}"
        )
        self.build_log.info(f"  - Alternative emoji mappings: {result.alternative_mappings}")

        return result

    def _expand(self, proposal: Proposal) -> List[Tuple[str, Candidate]]:
        """All (emoji key, candidate) claims derived from one proposal."""
        claims: List[Tuple[str, Candidate]] = []

        primary = Candidate(
            filename=proposal.filename,
            similarity=proposal.similarity,
            is_primary=True,
        )

        if proposal.emoji:
            claims.append((proposal.emoji, primary))

            if proposal.sub_emoji.strip():
                claims.append((proposal.emoji + proposal.sub_emoji, primary))

        if self.consider_alternatives:
            for alt_index, alt_emoji in enumerate(proposal.alternative_emojis):
                if not alt_emoji or not alt_emoji.strip():
                    continue
                claims.append((alt_emoji, Candidate(
                    filename=proposal.filename,
                    similarity=proposal.similarity,
                    is_primary=False,
                    alt_index=alt_index,
                )))

        return claims
