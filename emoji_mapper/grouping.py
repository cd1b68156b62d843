"""
Icon grouping for batch classification.

Icons are sent to the classifier in small groups of related files so that
similar icons are labeled side by side. Groups are formed from the words of
the file name:

1. Group by the first word ("arrow_up" -> "arrow")
2. Split oversized groups by the second word; up/down/left/right and
   bidirectional share one "directions" subgroup
3. Collect undersized subgroups into "<word>-extras-<n>" chunks
"""

import json
import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

logger = logging.getLogger(__name__)

WORD_SEPARATOR = re.compile(r"[-_]")

DIRECTION_WORDS = {"up", "down", "left", "right", "bidirectional"}
DIRECTION_BUCKET = "__direction__"
NO_WORD_BUCKET = "__none__"


@dataclass
class IconGroup:
    """A named batch of icon files."""
    name: str
    files: List[str] = field(default_factory=list)

    @property
    def stems(self) -> List[str]:
        return [Path(f).stem for f in self.files]

    def to_dict(self) -> Dict[str, object]:
        return {"name": self.name, "files": self.stems}


def _words(path: str) -> List[str]:
    return WORD_SEPARATOR.split(Path(path).stem)


def _second_word_bucket(path: str) -> str:
    words = _words(path)
    if len(words) < 2 or not words[1]:
        return NO_WORD_BUCKET
    word = words[1].lower()
    return DIRECTION_BUCKET if word in DIRECTION_WORDS else word


def generate_group_name(files: Sequence[str], base_word: str, index: Optional[int] = None) -> str:
    """
    Name a group after its first word.

    Subgroups (``index`` given) get the most common second word appended,
    "-directions" for the direction bucket, or ``index + 1`` when the files
    have no second word at all.
    """
    if index is None:
        return base_word

    second_words = [w for w in (_second_word_bucket(f) for f in files) if w != NO_WORD_BUCKET]
    if not second_words:
        return f"{base_word}-{index + 1}"

    # Counter.most_common keeps first-seen order among equal counts
    most_common = Counter(second_words).most_common(1)[0][0]
    if most_common == DIRECTION_BUCKET:
        return f"{base_word}-directions"
    return f"{base_word}-{most_common}"


def group_icon_sets(
    files: Sequence[str],
    max_group_size: int = 15,
    min_subgroup_size: int = 3,
    max_extras_group_size: int = 10,
) -> List[IconGroup]:
    """Group icon files for classification, preserving input order."""
    first_word_groups: Dict[str, List[str]] = {}
    for path in files:
        first_word = _words(path)[0].lower()
        first_word_groups.setdefault(first_word, []).append(path)

    final_groups: List[IconGroup] = []

    for first_word, group in first_word_groups.items():
        if len(group) <= max_group_size:
            final_groups.append(IconGroup(generate_group_name(group, first_word), list(group)))
            continue

        second_word_groups: Dict[str, List[str]] = {}
        for path in group:
            second_word_groups.setdefault(_second_word_bucket(path), []).append(path)

        extras: List[str] = []
        subgroup_index = 0
        for subgroup in second_word_groups.values():
            if len(subgroup) < min_subgroup_size:
                extras.extend(subgroup)
                continue
            name = generate_group_name(subgroup, first_word, subgroup_index)
            final_groups.append(IconGroup(name, list(subgroup)))
            subgroup_index += 1

        for chunk_index, start in enumerate(range(0, len(extras), max_extras_group_size), start=1):
            chunk = extras[start:start + max_extras_group_size]
            final_groups.append(IconGroup(f"{first_word}-extras-{chunk_index}", chunk))

    logger.debug(f"Grouped {len(files)} icons into {len(final_groups)} groups")
    return final_groups


def list_icon_files(directory: Union[str, Path], suffix: str = ".png") -> List[str]:
    """All files with ``suffix`` in ``directory``, sorted by name."""
    directory = Path(directory)
    if not directory.is_dir():
        return []
    return sorted(str(p) for p in directory.iterdir() if p.suffix == suffix)


def save_groups(groups: Sequence[IconGroup], path: Union[str, Path]) -> Path:
    """Write group names and file stems for inspection."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump([g.to_dict() for g in groups], f, indent=2, ensure_ascii=False)
    return path
