"""
Unit tests for output sorting and serialization.
"""

import pytest

from emoji_mapper.exceptions import OutputWriteError
from emoji_mapper.resolvers.base import MappingStats
from emoji_mapper.serializers import (
    MappingSerializer,
    OutputPaths,
    collation_key,
    emoji_unit_count,
    utf16_length,
)
from emoji_mapper.serializers.mapping_writer import sort_by_emoji, sort_by_icon, sort_ties
from tests.conftest import FIXED_TIMESTAMP, read_json

THUMBS_UP_MEDIUM = "\U0001F44D\U0001F3FD"  # 👍🏽
RED_HEART = "\u2764\uFE0F"                 # ❤️
PAGE = "\U0001F4C4"                         # 📄
PLUS = "\u2795"                            # ➕


class TestEmojiUnitCount:
    """Test grapheme-aware emoji counting."""

    @pytest.mark.parametrize("text,expected", [
        (PLUS, 1),
        (PAGE, 1),
        (PAGE + PLUS, 2),
        (THUMBS_UP_MEDIUM, 1),
        (RED_HEART, 1),
        (RED_HEART + PLUS, 2),
        ("abc", 0),
        ("", 0),
    ])
    def test_counts(self, text, expected):
        assert emoji_unit_count(text) == expected

    def test_modifier_sequence_counts_once_despite_length(self):
        assert len(THUMBS_UP_MEDIUM) == 2
        assert emoji_unit_count(THUMBS_UP_MEDIUM) == 1


class TestUtf16Length:

    def test_bmp_and_astral(self):
        assert utf16_length(PLUS) == 1
        assert utf16_length(PAGE) == 2
        assert utf16_length(PAGE + PLUS) == 3
        assert utf16_length(THUMBS_UP_MEDIUM) == 4


class TestSortOrders:
    """Test the three view orderings."""

    def test_by_icon_sorted_by_value(self):
        mappings = {PLUS: "plus", "⭕": "circle", PAGE: "add"}
        assert list(sort_by_icon(mappings).values()) == ["add", "circle", "plus"]

    def test_by_icon_ignores_case(self):
        mappings = {"a": "Beta", "b": "alpha"}
        assert list(sort_by_icon(mappings).values()) == ["alpha", "Beta"]

    def test_by_emoji_single_units_first(self):
        """A composed single emoji sorts with single emojis, not by raw length."""
        mappings = {
            PAGE + PLUS: "file_add",
            THUMBS_UP_MEDIUM: "approve",
            PLUS: "add",
        }
        keys = list(sort_by_emoji(mappings))

        assert set(keys[:2]) == {PLUS, THUMBS_UP_MEDIUM}
        assert keys[2] == PAGE + PLUS
        assert keys[:2] == sorted([PLUS, THUMBS_UP_MEDIUM], key=collation_key)

    def test_ties_sorted_by_raw_length(self):
        ties = {
            THUMBS_UP_MEDIUM: ["approve", "like"],
            PAGE + PLUS: ["file_add", "new_file"],
            PAGE: ["file", "document"],
            PLUS: ["add", "plus"],
        }
        assert list(sort_ties(ties)) == [PLUS, PAGE, PAGE + PLUS, THUMBS_UP_MEDIUM]

    def test_tie_arrays_not_reordered(self):
        ties = {PLUS: ["zeta", "alpha"]}
        assert sort_ties(ties)[PLUS] == ["zeta", "alpha"]


class TestMappingSerializer:
    """Test document construction and writing."""

    @pytest.fixture
    def stats(self):
        return MappingStats(primary_mappings=3, alternative_mappings=0, manual_overrides=1)

    @pytest.fixture
    def paths(self, tmp_path):
        return OutputPaths(
            mapping=tmp_path / "out" / "emoji-to-icon.json",
            mapping_by_emoji=tmp_path / "out" / "emoji-to-icon-by-emoji.json",
            ties=tmp_path / "out" / "emoji-ties.json",
        )

    def test_build_views_metadata(self, stats):
        views = MappingSerializer(generated=FIXED_TIMESTAMP).build_views(
            {PLUS: "plus", "⭕": "circle"}, {PLUS: ["add", "plus"]}, stats
        )

        for doc in (views.by_icon, views.by_emoji):
            assert doc["generated"] == FIXED_TIMESTAMP
            assert doc["totalMappings"] == 2
            assert doc["primaryMappings"] == 3
            assert doc["alternativeMappings"] == 0
            assert doc["manualOverrides"] == 1
            assert "Manual overrides" in doc["note"]
        assert list(views.by_icon) == [
            "generated", "totalMappings", "primaryMappings",
            "alternativeMappings", "manualOverrides", "note", "mappings",
        ]
        assert views.ties["totalTies"] == 1
        assert views.ties["ties"] == {PLUS: ["add", "plus"]}
        assert list(views.ties) == ["generated", "totalTies", "note", "ties"]

    def test_generated_timestamp_when_not_pinned(self, stats):
        views = MappingSerializer().build_views({}, {}, stats)
        assert views.by_icon["generated"].endswith("Z")
        assert views.by_icon["generated"] == views.ties["generated"]

    def test_write_creates_three_files(self, stats, paths):
        serializer = MappingSerializer(generated=FIXED_TIMESTAMP)
        views = serializer.build_views({PLUS: "add"}, {}, stats)
        serializer.write(views, paths)

        assert read_json(paths.mapping)["mappings"] == {PLUS: "add"}
        assert read_json(paths.mapping_by_emoji)["mappings"] == {PLUS: "add"}
        assert read_json(paths.ties)["ties"] == {}
        # emoji stays readable in the file
        assert PLUS in paths.mapping.read_text(encoding="utf-8")

    def test_write_is_byte_identical(self, stats, paths):
        serializer = MappingSerializer(generated=FIXED_TIMESTAMP)
        mappings = {PLUS: "add", PAGE: "file", THUMBS_UP_MEDIUM: "approve"}

        serializer.write(serializer.build_views(mappings, {}, stats), paths)
        first = [p.read_bytes() for p in paths.as_list()]
        serializer.write(serializer.build_views(dict(reversed(mappings.items())), {}, stats), paths)
        second = [p.read_bytes() for p in paths.as_list()]

        assert first == second

    def test_write_failure_raises(self, stats, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("file", encoding="utf-8")
        paths = OutputPaths(
            mapping=tmp_path / "emoji-to-icon.json",
            mapping_by_emoji=tmp_path / "emoji-to-icon-by-emoji.json",
            ties=blocker / "emoji-ties.json",
        )
        serializer = MappingSerializer(generated=FIXED_TIMESTAMP)

        with pytest.raises(OutputWriteError) as exc_info:
            serializer.write(serializer.build_views({PLUS: "add"}, {}, stats), paths)
        assert exc_info.value.details["path"].endswith("emoji-ties.json")
