"""
Manual tie-breaking overrides.

A curator copies emoji-ties.json to emoji-ties-manually-broken.json and
reorders the arrays; the first icon of each array becomes the winner for
that emoji. Overrides change who wins, never who tied, and never add new
emoji keys.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from emoji_mapper.build_log import BuildLog
from emoji_mapper.exceptions import OverrideFormatError
from emoji_mapper.resolvers.base import LabelConflict, ResolutionStrategy

logger = logging.getLogger(__name__)


@dataclass
class OverrideResult:
    """Outcome of applying a manual override file."""
    applied: int = 0
    changes: List[Tuple[str, str, str]] = field(default_factory=list)  # (emoji, previous, new)
    unknown_labels: List[str] = field(default_factory=list)
    rejected_labels: List[str] = field(default_factory=list)  # malformed entries
    skipped: bool = False  # True when the whole file was malformed


def parse_override_ties(data: Any) -> Tuple[Dict[str, List[str]], Dict[str, str]]:
    """
    Validate the override document.

    Returns:
        (well-formed entries, {label: problem} for entries that were rejected)

    Raises:
        OverrideFormatError: if the document is not an object with a ``ties``
            object. Individual bad entries do not raise.
    """
    if not isinstance(data, dict):
        raise OverrideFormatError(f"expected an object, got {type(data).__name__}")

    ties = data.get("ties")
    if not isinstance(ties, dict):
        raise OverrideFormatError("missing 'ties' object")

    valid: Dict[str, List[str]] = {}
    rejected: Dict[str, str] = {}
    for label, icons in ties.items():
        if not isinstance(icons, list) or not icons:
            rejected[label] = "must be a non-empty array"
        elif not all(isinstance(icon, str) and icon for icon in icons):
            rejected[label] = "must contain icon names"
        else:
            valid[label] = icons

    return valid, rejected


class ManualOverrideApplier:
    """
    Applies manual tie-break overrides to a resolved mapping in place.

    Usage:
        applier = ManualOverrideApplier()
        outcome = applier.apply(result.mappings, result.ties, overrides_data)
        print(outcome.applied)
    """

    def __init__(self, build_log: Optional[BuildLog] = None):
        self.build_log = build_log or BuildLog()

    def apply(
        self,
        mappings: Dict[str, str],
        ties: Dict[str, List[str]],
        overrides: Optional[Any],
        conflicts: Optional[List[LabelConflict]] = None,
    ) -> OverrideResult:
        """
        Force the first icon of each override array as the winner.

        Args:
            mappings: Resolved emoji -> icon mapping (mutated)
            ties: Tie records; read-only here, overrides never touch them
            overrides: Parsed override document, or None if there is none
            conflicts: Audit records from the resolver; overridden ones are
                re-tagged as MANUAL_OVERRIDE

        Returns:
            OverrideResult with the number of replaced winners
        """
        outcome = OverrideResult()

        if overrides is None:
            self.build_log.info("No manual tie-breaking overrides to apply")
            return outcome

        try:
            override_ties, rejected = parse_override_ties(overrides)
        except OverrideFormatError as e:
            self.build_log.warning(f"{e.message}; skipping manual overrides")
            outcome.skipped = True
            return outcome

        self.build_log.info("Found manual tie-breaking file, applying overrides...")

        for label, problem in rejected.items():
            outcome.rejected_labels.append(label)
            self.build_log.warning(f"Skipping manual override for {label}: entry {problem}")

        conflicts_by_label = {c.label: c for c in conflicts or []}

        for label, icons in override_ties.items():
            manual_winner = icons[0]

            if label not in mappings:
                outcome.unknown_labels.append(label)
                logger.debug(f"Ignoring override for unknown emoji {label}")
                continue

            previous = mappings[label]
            if previous == manual_winner:
                continue

            mappings[label] = manual_winner
            outcome.applied += 1
            outcome.changes.append((label, previous, manual_winner))
            self.build_log.info(f"Manual override for {label}: {previous} → {manual_winner}")

            conflict = conflicts_by_label.get(label)
            if conflict is not None:
                conflict.winner = manual_winner
                conflict.resolution_strategy = ResolutionStrategy.MANUAL_OVERRIDE
                conflict.resolution_reason = f"Manual override replaced {previous}"

        if outcome.unknown_labels:
            self.build_log.info(
                f"Ignored {len(outcome.unknown_labels)} override(s) for emojis without a mapping"
            )
        self.build_log.info(f"Applied {outcome.applied} manual tie-breaking overrides")

        return outcome
