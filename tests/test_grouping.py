"""
Unit tests for icon grouping and group result storage.
"""

from emoji_mapper.build_log import BuildLog
from emoji_mapper.grouping import IconGroup, generate_group_name, group_icon_sets, save_groups
from emoji_mapper.storage import AssignmentsStore
from tests.conftest import make_record, read_json, write_json


def pngs(*names):
    return [f"/icons/{name}.png" for name in names]


class TestGroupIconSets:
    """Test grouping by file name words."""

    def test_small_groups_by_first_word(self):
        groups = group_icon_sets(pngs("add", "add_circle", "Arrow-Up", "arrow_down"))

        assert [g.name for g in groups] == ["add", "arrow"]
        assert groups[1].stems == ["Arrow-Up", "arrow_down"]

    def test_large_group_split_by_second_word(self):
        files = pngs(
            "arrow_up", "arrow_down", "arrow_left", "arrow_right",
            "arrow_sync_a", "arrow_sync_b", "arrow_sync_c",
            "arrow_misc",
        )
        groups = group_icon_sets(files, max_group_size=5, min_subgroup_size=3)

        names = {g.name: g.stems for g in groups}
        assert names["arrow-directions"] == ["arrow_up", "arrow_down", "arrow_left", "arrow_right"]
        assert names["arrow-sync"] == ["arrow_sync_a", "arrow_sync_b", "arrow_sync_c"]
        assert names["arrow-extras-1"] == ["arrow_misc"]

    def test_extras_chunked(self):
        files = pngs(*[f"icon_w{i}" for i in range(7)])
        groups = group_icon_sets(
            files, max_group_size=3, min_subgroup_size=2, max_extras_group_size=3
        )

        assert [g.name for g in groups] == ["icon-extras-1", "icon-extras-2", "icon-extras-3"]
        assert [len(g.files) for g in groups] == [3, 3, 1]

    def test_no_second_word_subgroup_uses_index(self):
        files = pngs("star", "star", "star", "star_a", "star_a", "star_a")
        groups = group_icon_sets(files, max_group_size=4, min_subgroup_size=3)

        assert [g.name for g in groups] == ["star-1", "star-a"]

    def test_every_file_in_exactly_one_group(self):
        files = pngs(*[f"shape_{kind}_{i}" for kind in ("circle", "square", "x") for i in range(6)])
        groups = group_icon_sets(files, max_group_size=10, min_subgroup_size=7)

        grouped = [f for g in groups for f in g.files]
        assert sorted(grouped) == sorted(files)


class TestGenerateGroupName:

    def test_base_name(self):
        assert generate_group_name(pngs("add"), "add") == "add"

    def test_most_common_second_word(self):
        files = pngs("doc_edit", "doc_edit_2", "doc_view")
        assert generate_group_name(files, "doc", 0) == "doc-edit"


class TestGroupFiles:
    """Test pending detection and group file output."""

    def test_save_groups(self, tmp_path):
        path = save_groups([IconGroup("add", pngs("add", "add_circle"))], tmp_path / "groups.json")
        assert read_json(path) == [{"name": "add", "files": ["add", "add_circle"]}]

    def test_save_group_result(self, tmp_path):
        path = AssignmentsStore().save_group_result(
            "arrow",
            [make_record("arrow_up", "⬆", 0.9), make_record("Arrow_down", "⬇", 0.9)],
            tmp_path / "emoji-groups",
        )

        data = read_json(path)
        assert path.name == "arrow.json"
        assert data["groupName"] == "arrow"
        assert data["generated"].endswith("Z")
        assert [a["filename"] for a in data["assignments"]] == ["Arrow_down", "arrow_up"]

    def test_pending_groups(self, tmp_path):
        groups_dir = tmp_path / "emoji-groups"
        store = AssignmentsStore()
        store.save_group_result("done", [make_record("done", "✅", 0.9)], groups_dir)
        write_json(groups_dir / "failed.json", {"assignments": [make_record("failed", "n/a", 0.0)]})
        (groups_dir / "broken.json").write_text("{", encoding="utf-8")

        groups = [IconGroup(name, []) for name in ("done", "failed", "broken", "new")]
        pending, existing = store.pending_groups(groups, groups_dir)

        assert [g.name for g in pending] == ["failed", "broken", "new"]
        assert [e["assignments"][0]["filename"] for e in existing] == ["done"]

    def test_aggregate_skips_unusable_groups(self, tmp_path):
        groups_dir = tmp_path / "emoji-groups"
        output = tmp_path / "emoji-assignments.json"
        build_log = BuildLog()
        store = AssignmentsStore(build_log)
        store.save_group_result("b", [make_record("beta", "🅱", 0.9)], groups_dir)
        store.save_group_result("a", [make_record("alpha", "🅰", 0.9)], groups_dir)
        write_json(groups_dir / "c.json", {"assignments": [make_record("gamma", "n/a", 0.0)]})

        total = store.aggregate_groups(groups_dir, output)

        assert total == 2
        assert [a["filename"] for a in read_json(output)["assignments"]] == ["alpha", "beta"]
        assert build_log.error_count == 1
