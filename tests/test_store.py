import pytest

from sitestack.errors import StoreSealedError
from sitestack.store import MetadataStore, deep_merge, scope_of


class TestDeepMerge:
    def test_override_wins_and_other_keys_kept(self):
        merged = deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4})
        assert merged == {"a": 1, "b": 3, "c": 4}

    def test_nested_mappings_merge_key_by_key(self):
        base = {"author": {"name": "Ann", "email": "ann@example.com"}}
        override = {"author": {"name": "Bob"}}
        assert deep_merge(base, override) == {
            "author": {"name": "Bob", "email": "ann@example.com"}
        }

    def test_lists_are_replaced_not_concatenated(self):
        merged = deep_merge({"tags": ["a", "b"]}, {"tags": ["c"]})
        assert merged == {"tags": ["c"]}

    def test_type_mismatch_takes_override(self):
        assert deep_merge({"x": {"y": 1}}, {"x": "flat"}) == {"x": "flat"}
        assert deep_merge({"x": "flat"}, {"x": {"y": 1}}) == {"x": {"y": 1}}

    def test_idempotent(self):
        fragment = {"a": 1, "n": {"b": [1, 2], "c": {"d": None}}}
        assert deep_merge(fragment, fragment) == fragment

    def test_inputs_not_mutated(self):
        base = {"n": {"a": 1}}
        override = {"n": {"b": 2}}
        deep_merge(base, override)
        assert base == {"n": {"a": 1}}
        assert override == {"n": {"b": 2}}


class TestMetadataStore:
    def test_get_without_fragments_is_empty(self):
        assert MetadataStore().get("nowhere/page.md") == {}

    def test_ancestor_key_visible_in_descendant(self):
        store = MetadataStore()
        store.add("", {"site": "example"})
        store.add("blog", {"layout": "blog"})
        assert store.get("blog/2024/a.md") == {"site": "example", "layout": "blog"}

    def test_descendant_wins_on_conflict(self):
        store = MetadataStore()
        store.add("blog", {"layout": "blog", "author": "Ann"})
        store.add("blog/a.md", {"layout": "special"})
        assert store.get("blog/a.md") == {"layout": "special", "author": "Ann"}

    def test_specificity_beats_insertion_order(self):
        store = MetadataStore()
        store.add("blog/a.md", {"layout": "special"})
        store.add("blog", {"layout": "blog"})
        store.add("", {"layout": "root"})
        assert store.get("blog/a.md")["layout"] == "special"
        assert store.get("blog/b.md")["layout"] == "blog"

    def test_same_scope_last_add_wins(self):
        store = MetadataStore()
        store.add("blog", {"layout": "first", "keep": True})
        store.add("blog", {"layout": "second"})
        assert store.get("blog/a.md") == {"layout": "second", "keep": True}

    def test_unrelated_scopes_not_merged(self):
        store = MetadataStore()
        store.add("news", {"layout": "news"})
        store.add("blog/b.md", {"title": "B"})
        store.add("blog", {"section": "blog"})
        assert store.get("blog/a.md") == {"section": "blog"}

    def test_name_prefix_is_not_an_ancestor(self):
        store = MetadataStore()
        store.add("blog", {"layout": "blog"})
        assert store.get("blogger/a.md") == {}

    def test_fragments_copied_on_add(self):
        fragment = {"tags": ["a"]}
        store = MetadataStore()
        store.add("", fragment)
        fragment["tags"].append("b")
        store.get("x.md")["tags"].append("c")
        assert store.get("x.md") == {"tags": ["a"]}

    def test_nested_result_owned_by_caller(self):
        store = MetadataStore()
        store.add("", {"files": {"a.md": {"tags": ["x"]}}})
        store.add("blog", {"files": {"b.md": {}}})
        result = store.get("blog/b.md")
        result["files"]["a.md"]["tags"].append("y")
        result["files"]["b.md"]["title"] = "B"
        assert store.get("blog/b.md") == {"files": {"a.md": {"tags": ["x"]}, "b.md": {}}}
        assert store.get("a.md") == {"files": {"a.md": {"tags": ["x"]}}}

    def test_add_after_seal_rejected(self):
        store = MetadataStore()
        store.add("", {"a": 1})
        store.seal()
        with pytest.raises(StoreSealedError):
            store.add("", {"b": 2})
        assert store.get("x.md") == {"a": 1}

    def test_scopes_in_first_seen_order(self):
        store = MetadataStore()
        store.add("blog", {})
        store.add("", {})
        store.add("blog", {})
        assert store.scopes() == ["blog", ""]
        assert len(store) == 3


def test_scope_of(tmp_path):
    assert scope_of(tmp_path, tmp_path) == ""
    assert scope_of(tmp_path, tmp_path / "blog") == "blog"
    assert scope_of(tmp_path, tmp_path / "blog" / "a.md") == "blog/a.md"
