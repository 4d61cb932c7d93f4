"""Tests for the skill taxonomy resolver."""

import itertools

import pytest

from models.schemas.skill import Skill
from services.errors import NotFoundError
from services.taxonomy import SkillTaxonomy


class TestResolve:
    def test_by_id(self, taxonomy):
        assert taxonomy.resolve(2).name == "Go"

    def test_by_numeric_string(self, taxonomy):
        assert taxonomy.resolve("3").name == "Python"

    def test_by_name_case_and_whitespace_insensitive(self, taxonomy):
        assert taxonomy.resolve("  PYTHON ").id == 3

    def test_by_alias(self, taxonomy):
        assert taxonomy.resolve("GoLang").id == 2
        assert taxonomy.resolve("go   lang").id == 2
        assert taxonomy.resolve("K8S").id == 5

    def test_unknown_returns_none(self, taxonomy):
        assert taxonomy.resolve("cobol") is None
        assert taxonomy.resolve(999) is None
        assert taxonomy.resolve("") is None
        assert taxonomy.resolve(None) is None

    def test_resolve_or_raise(self, taxonomy):
        with pytest.raises(NotFoundError):
            taxonomy.resolve_or_raise("cobol")

    def test_name_wins_over_alias(self):
        tax = SkillTaxonomy([
            Skill(id=1, name="Rust", aliases=["go"]),
            Skill(id=2, name="Go"),
        ])
        assert tax.resolve("go").id == 2

    def test_find_by_alias(self, taxonomy):
        assert [s.id for s in taxonomy.find_by_alias("Docker Engine")] == [4]


class TestSkillSchema:
    def test_aliases_normalized_and_deduplicated(self):
        skill = Skill(id=1, name="JavaScript", aliases=["JS", " js ", "ECMAScript"])
        assert skill.aliases == ["js", "ecmascript"]

    def test_normalized_name_derived(self):
        assert Skill(id=1, name="  Machine   Learning ").normalized_name == "machine learning"

    def test_popularity_clamped(self):
        assert Skill(id=1, name="a", popularity_score=150).popularity_score == 100
        assert Skill(id=1, name="a", popularity_score=-3).popularity_score == 0


class TestHierarchy:
    def test_ancestors_ordered_to_root(self, taxonomy):
        assert [s.id for s in taxonomy.ancestors_of(8)] == [3, 1]

    def test_ancestors_of_root_empty(self, taxonomy):
        assert taxonomy.ancestors_of(1) == []
        assert taxonomy.ancestors_of(999) == []

    def test_descendants_breadth_first(self, taxonomy):
        assert [s.id for s in taxonomy.descendants_of(1)] == [2, 3, 8]

    def test_children_and_parent(self, taxonomy):
        assert [s.id for s in taxonomy.children_of(9)] == [4, 5]
        assert taxonomy.parent_of(4).id == 9
        assert taxonomy.parent_of(9) is None

    def test_depth_is_unbounded(self):
        chain = [Skill(id=i, name=f"level {i}", parent_id=i - 1 if i > 1 else None) for i in range(1, 21)]
        tax = SkillTaxonomy(chain)
        assert len(tax.descendants_of(1)) == 19
        assert len(tax.ancestors_of(20)) == 19

    def test_cycle_is_broken(self):
        tax = SkillTaxonomy([
            Skill(id=1, name="a", parent_id=3),
            Skill(id=2, name="b", parent_id=1),
            Skill(id=3, name="c", parent_id=2),
        ])
        for sid in (1, 2, 3):
            ancestors = tax.ancestors_of(sid)
            assert sid not in [s.id for s in ancestors]
            assert len(ancestors) <= 2
        assert len(tax.descendants_of(1)) <= 2

    def test_dangling_parent_treated_as_root(self):
        tax = SkillTaxonomy([Skill(id=1, name="orphan", parent_id=42)])
        assert tax.ancestors_of(1) == []
        assert tax.root_of(1) == 1


class TestEquivalence:
    def test_identical(self, taxonomy):
        assert taxonomy.are_equivalent("go", 2)

    def test_ancestor_and_descendant(self, taxonomy):
        assert taxonomy.are_equivalent("Python", "Django")
        assert taxonomy.are_equivalent("Programming", "Django")

    def test_siblings_not_equivalent(self, taxonomy):
        assert not taxonomy.are_equivalent("Go", "Python")

    def test_shared_alias(self):
        tax = SkillTaxonomy([
            Skill(id=1, name="PostgreSQL", aliases=["postgres", "pg"]),
            Skill(id=2, name="Postgres DB", aliases=["postgres"]),
        ])
        assert tax.are_equivalent(1, 2)

    def test_unknown_never_equivalent(self, taxonomy):
        assert not taxonomy.are_equivalent("cobol", "cobol")
        assert not taxonomy.are_equivalent("go", None)

    def test_symmetric(self, taxonomy):
        ids = [s.id for s in taxonomy.all()] + ["golang", "k8s", "cobol"]
        for a, b in itertools.product(ids, repeat=2):
            assert taxonomy.are_equivalent(a, b) == taxonomy.are_equivalent(b, a)
