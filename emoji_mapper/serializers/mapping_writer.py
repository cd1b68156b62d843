"""
Output serialization for the emoji -> icon mapping.

Three views of the same final state are produced on every run:

    emoji-to-icon.json           sorted by icon name
    emoji-to-icon-by-emoji.json  sorted by emoji unit count, then emoji
    emoji-ties.json              tie records sorted by key length, then emoji

All three are rendered in memory before anything touches the disk.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from emoji_mapper.build_log import BuildLog, utc_timestamp
from emoji_mapper.exceptions import OutputWriteError
from emoji_mapper.resolvers.base import MappingStats
from emoji_mapper.serializers.sorting import by_emoji_key, by_icon_key, by_length_key


OVERRIDES_FILENAME = "emoji-ties-manually-broken.json"

BY_ICON_NOTE = (
    "Sorted alphabetically by icon name (value). Manual overrides from "
    f"{OVERRIDES_FILENAME} are applied if the file exists."
)
BY_EMOJI_NOTE = (
    "Sorted alphabetically by emoji key. Manual overrides from "
    f"{OVERRIDES_FILENAME} are applied if the file exists."
)
TIES_NOTE = (
    "Only contains primary emoji conflicts (primary vs primary). Alternative emoji "
    "conflicts are not included. Sorted by emoji length (shorter first), then "
    "alphabetically within each length group. To manually override tie-breaking, "
    f"copy this file to '{OVERRIDES_FILENAME}' and reorder the arrays - the first "
    "item in each array will be used as the winner."
)


@dataclass
class OutputPaths:
    """Destinations of the three output artifacts."""
    mapping: Path
    mapping_by_emoji: Path
    ties: Path

    @classmethod
    def from_settings(cls, settings) -> "OutputPaths":
        return cls(
            mapping=settings.mapping_path,
            mapping_by_emoji=settings.mapping_by_emoji_path,
            ties=settings.ties_path,
        )

    def as_list(self) -> List[Path]:
        return [self.mapping, self.mapping_by_emoji, self.ties]


@dataclass
class MappingViews:
    """The three output documents, ready to be written."""
    by_icon: Dict[str, Any]
    by_emoji: Dict[str, Any]
    ties: Dict[str, Any]


def sort_by_icon(mappings: Dict[str, str]) -> Dict[str, str]:
    return dict(sorted(mappings.items(), key=by_icon_key))


def sort_by_emoji(mappings: Dict[str, str]) -> Dict[str, str]:
    return {label: mappings[label] for label in sorted(mappings, key=by_emoji_key)}


def sort_ties(ties: Dict[str, List[str]]) -> Dict[str, List[str]]:
    return {label: list(ties[label]) for label in sorted(ties, key=by_length_key)}


def render_json(data: Dict[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


class MappingSerializer:
    """
    Builds and writes the output artifacts.

    Usage:
        serializer = MappingSerializer()
        views = serializer.build_views(result.mappings, result.ties, result.stats)
        serializer.write(views, OutputPaths.from_settings(settings))

    Pass ``generated`` to pin the timestamp (byte-identical output across runs).
    """

    def __init__(
        self,
        generated: Optional[str] = None,
        build_log: Optional[BuildLog] = None,
    ):
        self.generated = generated
        self.build_log = build_log or BuildLog()

    def build_views(
        self,
        mappings: Dict[str, str],
        ties: Dict[str, List[str]],
        stats: MappingStats,
    ) -> MappingViews:
        """Sort the final state into the three output documents."""
        generated = self.generated or utc_timestamp()

        def mapping_document(note: str, ordered: Dict[str, str]) -> Dict[str, Any]:
            return {
                "generated": generated,
                "totalMappings": len(mappings),
                "primaryMappings": stats.primary_mappings,
                "alternativeMappings": stats.alternative_mappings,
                "manualOverrides": stats.manual_overrides,
                "note": note,
                "mappings": ordered,
            }

        return MappingViews(
            by_icon=mapping_document(BY_ICON_NOTE, sort_by_icon(mappings)),
            by_emoji=mapping_document(BY_EMOJI_NOTE, sort_by_emoji(mappings)),
            ties={
                "generated": generated,
                "totalTies": len(ties),
                "note": TIES_NOTE,
                "ties": sort_ties(ties),
            },
        )

    def write(self, views: MappingViews, paths: OutputPaths) -> None:
        """
        Write all three artifacts.

        Raises:
            OutputWriteError: if any artifact cannot be written. The run is
                failed even if other artifacts were already written.
        """
        self.build_log.info("Writing output files...")

        rendered = [
            (paths.mapping, render_json(views.by_icon)),
            (paths.mapping_by_emoji, render_json(views.by_emoji)),
            (paths.ties, render_json(views.ties)),
        ]

        for path, content in rendered:
            path = Path(path)
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                with open(path, "w", encoding="utf-8") as f:
                    f.write(content)
            except OSError as e:
                raise OutputWriteError(str(path), str(e)) from e

        self.build_log.info(
            f"✅ {paths.mapping.name} created with {views.by_icon['totalMappings']} mappings"
        )
        self.build_log.info(
            f"✅ {paths.mapping_by_emoji.name} created with "
            f"{len(views.by_emoji['mappings'])} mappings"
        )
        self.build_log.info(
            f"✅ {paths.ties.name} created with {views.ties['totalTies']} tie records "
            f"(primary conflicts only)"
        )
