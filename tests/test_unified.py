"""
Tests for the UnifiedIndex merge rules.
"""

from graph_memory.models import Entity, Relation
from graph_memory.unified import UnifiedIndex


class StaticIndex:
    """Index provider over fixed lists, used as a stand-in external index."""

    def __init__(self, entities=None, relations=None):
        self._entities = {e.name: e for e in entities or []}
        self._relations = list(relations or [])
        self.close_calls = 0

    def lookup(self, name):
        return self._entities.get(name)

    def relations_of(self, name):
        return [r for r in self._relations if r.from_ == name]

    def search(self, text):
        return [e for e in self._entities.values() if text.lower() in e.name.lower()]

    def entities(self, limit=100):
        return list(self._entities.values())[:max(limit, 0)]

    def close(self):
        self.close_calls += 1


class TestUnifiedLookup:
    """Tests for UnifiedIndex.lookup."""

    async def test_local_wins_on_collision(self, local_index, external_index):
        """Test the local entity shadows the external one."""
        unified = UnifiedIndex(local_index, external_index)

        entity = unified.lookup("Shared")

        assert entity.entity_type == "local"
        assert entity.observations == ["Only in memory"]

    async def test_falls_back_to_external(self, local_index, external_index):
        """Test names missing locally are looked up externally."""
        unified = UnifiedIndex(local_index, external_index)

        assert unified.lookup("Zettelkasten").entity_type == "note"

    async def test_missing_everywhere(self, local_index, external_index):
        """Test absent names return None."""
        unified = UnifiedIndex(local_index, external_index)

        assert unified.lookup("Nobody") is None


class TestUnifiedSearch:
    """Tests for UnifiedIndex.search."""

    async def test_collision_returns_single_local_entity(self, local_index, external_index):
        """Test a name present in both indexes appears once, from local."""
        unified = UnifiedIndex(local_index, external_index)

        results = [e for e in unified.search("Shared") if e.name == "Shared"]

        assert len(results) == 1
        assert results[0].entity_type == "local"

    async def test_local_results_first(self, local_index, external_index):
        """Test local matches precede external matches."""
        unified = UnifiedIndex(local_index, external_index)

        names = [e.name for e in unified.search("a")]

        # Python matches through its type ("language")
        assert names == ["Alice", "Carol", "Dana", "Shared", "Python", "Zettelkasten"]

    async def test_external_only_match(self, local_index, external_index):
        """Test external entities are returned when local has no match."""
        unified = UnifiedIndex(local_index, external_index)

        assert [e.name for e in unified.search("language")] == ["Python"]


class TestUnifiedRelations:
    """Tests for UnifiedIndex.relations_of."""

    async def test_relations_are_concatenated(self, local_index):
        """Test local and external relations are both returned, local first."""
        external = StaticIndex(relations=[
            Relation(from_="Alice", to="Python", relation_type="studies"),
        ])
        unified = UnifiedIndex(local_index, external)

        relations = unified.relations_of("Alice")

        assert [r.to for r in relations] == ["Bob", "Carol", "Python"]

    async def test_duplicate_relations_are_kept(self, local_index):
        """Test identical relations from both sides are not deduplicated."""
        same = Relation(from_="Bob", to="Carol", relation_type="knows")
        unified = UnifiedIndex(local_index, StaticIndex(relations=[same]))

        assert len(unified.relations_of("Bob")) == 2


class TestUnifiedQueryAll:
    """Tests for UnifiedIndex.query_all."""

    async def test_query_all_precedence(self, local_index, external_index):
        """Test query_all merges with local precedence."""
        unified = UnifiedIndex(local_index, external_index)

        names = [e.name for e in unified.query_all()]

        assert names == ["Alice", "Bob", "Carol", "Dana", "Shared", "Python", "Zettelkasten"]


class TestLocalOnlyMode:
    """Tests for UnifiedIndex without an external provider."""

    async def test_matches_empty_external(self, local_index):
        """Test local-only mode equals a unified index with an empty external provider."""
        local_only = UnifiedIndex(local_index)
        with_empty = UnifiedIndex(local_index, StaticIndex())

        for name in ("Alice", "Shared", "Nobody", ""):
            assert local_only.lookup(name) == with_empty.lookup(name)
            assert local_only.relations_of(name) == with_empty.relations_of(name)
        for text in ("a", "person", "zzz", ""):
            assert local_only.search(text) == with_empty.search(text)
        assert local_only.query_all() == with_empty.query_all()
        assert local_only.has_external is False

    async def test_lookup_local_only(self, local_index):
        """Test lookup works without an external index."""
        unified = UnifiedIndex(local_index)

        assert unified.lookup("Alice").name == "Alice"
        assert unified.lookup("Zettelkasten") is None


class TestUnifiedClose:
    """Tests for UnifiedIndex.close."""

    async def test_close_twice(self, local_index, external_index):
        """Test closing twice does not raise."""
        unified = UnifiedIndex(local_index, external_index)

        unified.close()
        unified.close()

    def test_close_reaches_both_providers(self):
        """Test close is forwarded to local and external providers."""
        local, external = StaticIndex(), StaticIndex()
        unified = UnifiedIndex(local, external)

        unified.close()

        assert local.close_calls == 1
        assert external.close_calls == 1

    def test_close_local_only(self):
        """Test close without external provider closes local."""
        local = StaticIndex()

        UnifiedIndex(local).close()

        assert local.close_calls == 1

    def test_static_index_lookup(self):
        """Test the stand-in provider resolves external-only entities."""
        external = StaticIndex(entities=[Entity(name="X", entity_type="external")])
        local = StaticIndex(entities=[Entity(name="X", entity_type="local")])
        unified = UnifiedIndex(local, external)

        assert unified.lookup("X").entity_type == "local"
        assert [e.entity_type for e in unified.search("X")] == ["local"]
