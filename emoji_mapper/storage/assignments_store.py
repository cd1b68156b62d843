"""
File-based storage for classifier assignments and manual overrides.

Layout on disk (relative to the work directory):
    emoji-assignments.json             aggregated classifier output
    emoji-ties-manually-broken.json    optional curator overrides
    emoji-groups/
        {group_name}.json              classifier output for one icon group
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from emoji_mapper.build_log import BuildLog, utc_timestamp
from emoji_mapper.exceptions import InputArtifactError, OutputWriteError
from emoji_mapper.grouping import IconGroup
from emoji_mapper.serializers.sorting import collation_key

logger = logging.getLogger(__name__)

# Placeholder the classifier emits when it could not assign an emoji
UNASSIGNED_MARKER = "n/a"

PathLike = Union[str, Path]


@dataclass
class AssignmentsFile:
    """Contents of emoji-assignments.json."""
    generated: str
    total: int
    assignments: List[Any] = field(default_factory=list)


def _filename_sort_key(record: Any):
    filename = record.get("filename") if isinstance(record, dict) else None
    return collation_key(filename or "")


class AssignmentsStore:
    """
    Reads and writes the JSON artifacts around the mapping pipeline.

    Usage:
        store = AssignmentsStore(build_log)
        data = store.load_assignments(settings.assignments_path)
        overrides = store.load_overrides(settings.overrides_path)
    """

    def __init__(self, build_log: Optional[BuildLog] = None):
        self.build_log = build_log or BuildLog()

    def load_assignments(self, path: PathLike) -> AssignmentsFile:
        """
        Load the aggregated classifier output.

        Raises:
            InputArtifactError: if the file is missing, unreadable or does not
                have an ``assignments`` array.
        """
        path = Path(path)
        self.build_log.info(f"Reading {path.name} file...")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise InputArtifactError(str(path), "file not found") from e
        except json.JSONDecodeError as e:
            raise InputArtifactError(str(path), f"invalid JSON ({e})") from e
        except (OSError, UnicodeDecodeError) as e:
            raise InputArtifactError(str(path), str(e)) from e

        if not isinstance(data, dict):
            raise InputArtifactError(str(path), "expected a JSON object")

        assignments = data.get("assignments")
        if not isinstance(assignments, list):
            raise InputArtifactError(str(path), "missing 'assignments' array")

        total = data.get("total")
        if not isinstance(total, int) or isinstance(total, bool):
            total = len(assignments)

        result = AssignmentsFile(
            generated=str(data.get("generated", "")),
            total=total,
            assignments=assignments,
        )
        self.build_log.info(f"Loaded {result.total} assignments from {result.generated}")
        return result

    def load_overrides(self, path: PathLike) -> Optional[Any]:
        """
        Load the manual tie-break file.

        Returns the parsed document, or None when there is nothing usable.
        Never raises: a missing file means no overrides, an unreadable one is
        logged and skipped.
        """
        path = Path(path)
        self.build_log.info("Checking for manual tie-breaking overrides...")

        try:
            with open(path, "r", encoding="utf-8") as f:
                content = f.read()
        except FileNotFoundError:
            self.build_log.info(f"No manual tie-breaking file found ({path.name})")
            return None
        except (OSError, UnicodeDecodeError) as e:
            self.build_log.error("Error reading manual tie-breaking file", e)
            return None

        if not content.strip():
            self.build_log.info(f"Manual tie-breaking file {path.name} is empty")
            return None

        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            self.build_log.warning(
                f"Manual tie-breaking file {path.name} is not valid JSON ({e}); skipping overrides"
            )
            return None

    def save_group_result(
        self,
        group_name: str,
        assignments: List[Dict[str, Any]],
        groups_dir: PathLike,
    ) -> Path:
        """
        Persist classifier output for one icon group.

        Called by the external classification loop after each group; the
        files it writes are what pending_groups() and aggregate_groups() read.
        """
        groups_dir = Path(groups_dir)
        result = {
            "groupName": group_name,
            "generated": utc_timestamp(),
            "assignments": sorted(assignments, key=_filename_sort_key),
        }

        group_path = groups_dir / f"{group_name}.json"
        try:
            groups_dir.mkdir(parents=True, exist_ok=True)
            with open(group_path, "w", encoding="utf-8") as f:
                json.dump(result, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise OutputWriteError(str(group_path), str(e)) from e

        logger.info(f" > Saved group result: {group_name} ({len(assignments)} icons)")
        return group_path

    def _read_group(self, group_path: Path) -> Dict[str, Any]:
        """Read one group file; raises ValueError/OSError when unusable."""
        with open(group_path, "r", encoding="utf-8") as f:
            content = f.read()

        if UNASSIGNED_MARKER in content:
            raise ValueError(f"Group file {group_path.name} contains {UNASSIGNED_MARKER} assignments")

        data = json.loads(content)
        if not isinstance(data, dict) or not isinstance(data.get("assignments"), list):
            raise ValueError(f"Group file {group_path.name} has no 'assignments' array")
        return data

    def pending_groups(
        self,
        groups: Sequence[IconGroup],
        groups_dir: PathLike,
    ) -> Tuple[List[IconGroup], List[Dict[str, Any]]]:
        """
        Split icon groups into those still to classify and those already done.

        A group counts as done when its result file exists, parses and holds
        no unassigned marker.
        """
        groups_dir = Path(groups_dir)
        pending: List[IconGroup] = []
        existing: List[Dict[str, Any]] = []

        for group in groups:
            group_path = groups_dir / f"{group.name}.json"
            if not group_path.exists():
                pending.append(group)
                continue

            try:
                data = self._read_group(group_path)
            except (OSError, UnicodeDecodeError, ValueError) as e:
                self.build_log.error(
                    f" > Failed to read existing group file {group_path.name}, will reprocess", e
                )
                pending.append(group)
                continue

            existing.append(data)
            logger.info(
                f" > Skipping already processed group: {group.name} "
                f"({len(data['assignments'])} icons)"
            )

        return pending, existing

    def aggregate_groups(self, groups_dir: PathLike, output_path: PathLike) -> int:
        """
        Merge every group result file into emoji-assignments.json.

        Returns the number of aggregated assignments.

        Raises:
            OutputWriteError: if the aggregated file cannot be written.
        """
        groups_dir = Path(groups_dir)
        output_path = Path(output_path)
        all_assignments: List[Any] = []

        group_files = sorted(groups_dir.glob("*.json")) if groups_dir.is_dir() else []
        if not group_files:
            self.build_log.warning(f"No group result files found in {groups_dir}")

        for group_path in group_files:
            try:
                data = self._read_group(group_path)
            except (OSError, UnicodeDecodeError, ValueError) as e:
                self.build_log.error(
                    f"Failed to read group file {group_path.name} during aggregation", e
                )
                continue
            all_assignments.extend(data["assignments"])

        output = {
            "generated": utc_timestamp(),
            "total": len(all_assignments),
            "assignments": sorted(all_assignments, key=_filename_sort_key),
        }

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, "w", encoding="utf-8") as f:
                json.dump(output, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise OutputWriteError(str(output_path), str(e)) from e

        self.build_log.info(f"Aggregated {len(all_assignments)} assignments to {output_path}")
        return len(all_assignments)
