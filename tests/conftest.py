"""
Shared fixtures for the emoji mapper tests.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from emoji_mapper.core.config import Settings

FIXED_TIMESTAMP = "2025-01-01T00:00:00.000Z"


def make_record(
    filename: str,
    emoji: str,
    similarity: float,
    sub_emoji: str = "",
    alternatives: Optional[List[str]] = None,
    name: Optional[str] = None,
) -> Dict[str, Any]:
    """An emoji-assignments.json record."""
    return {
        "filename": filename,
        "name": name or filename.replace("_", " ").title(),
        "metaphor": [],
        "emoji": emoji,
        "subEmoji": sub_emoji,
        "alternativeEmojis": alternatives or [],
        "similarity": similarity,
    }


def write_json(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False)
    return path


def read_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a temporary work directory."""
    return Settings(work_dir=tmp_path / "work", log_dir=tmp_path / "logs")


@pytest.fixture
def write_assignments(settings):
    """Write an emoji-assignments.json with the given records."""
    def _write(records: List[Dict[str, Any]]) -> Path:
        return write_json(settings.assignments_path, {
            "generated": FIXED_TIMESTAMP,
            "total": len(records),
            "assignments": records,
        })
    return _write
