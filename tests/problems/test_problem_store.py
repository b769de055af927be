"""Tests for the in-memory problem store."""

from problems.store import ProblemStore


class TestProblemStore:
    def test_empty(self):
        store = ProblemStore()
        assert len(store) == 0
        assert store.all() == []
        assert store.get("p1") is None

    def test_keeps_order(self, sample_problems):
        store = ProblemStore(sample_problems)
        assert [p.id for p in store.all()] == ["p1", "p2", "p3", "p4"]
        assert [p.id for p in store] == ["p1", "p2", "p3", "p4"]

    def test_all_returns_copy(self, sample_problems):
        store = ProblemStore(sample_problems)
        listed = store.all()
        listed.clear()
        assert len(store) == 4

    def test_upsert_appends_new(self, sample_problems, problem_factory):
        store = ProblemStore(sample_problems)
        store.upsert(problem_factory(id="p5", name="Merge Intervals"))
        assert store.all()[-1].id == "p5"
        assert len(store) == 5

    def test_upsert_replaces_in_place(self, sample_problems):
        store = ProblemStore(sample_problems)
        updated = sample_problems[1].model_copy(update={"level": "EASY"})
        store.upsert(updated)
        assert [p.id for p in store.all()] == ["p1", "p2", "p3", "p4"]
        assert store.get("p2").level == "EASY"

    def test_replace_and_clear(self, sample_problems):
        store = ProblemStore(sample_problems)
        store.replace(sample_problems[:1])
        assert [p.id for p in store.all()] == ["p1"]
        store.clear()
        assert len(store) == 0
