from pathlib import Path

from spansmith.core.lifecycle import HighlighterLifecycle, transient_cache_key


class CountingFactory:
    def __init__(self) -> None:
        self.calls: list[tuple[tuple[Path, ...], tuple[Path, ...]]] = []

    def __call__(self, grammar_paths, query_paths) -> object:
        self.calls.append((tuple(grammar_paths), tuple(query_paths)))
        return object()


BASE_GRAMMARS = (Path("grammars"),)
BASE_QUERIES = (Path("queries/base"),)


def _lifecycle(**kwargs) -> tuple[HighlighterLifecycle, CountingFactory]:
    factory = CountingFactory()
    return HighlighterLifecycle(factory, BASE_GRAMMARS, BASE_QUERIES, **kwargs), factory


def test_calls_without_extra_queries_share_one_classifier() -> None:
    lifecycle, factory = _lifecycle()
    first = lifecycle.resolve()
    second = lifecycle.resolve([])
    assert first is second
    assert factory.calls == [(BASE_GRAMMARS, BASE_QUERIES)]


def test_extra_queries_build_a_transient_classifier_after_the_base() -> None:
    lifecycle, factory = _lifecycle()
    shared = lifecycle.resolve()
    transient = lifecycle.resolve([Path("queries/extra")])
    assert transient is not shared
    assert factory.calls[-1] == (BASE_GRAMMARS, BASE_QUERIES + (Path("queries/extra"),))


def test_transient_classifiers_are_not_reused_by_default() -> None:
    lifecycle, factory = _lifecycle()
    first = lifecycle.resolve(["queries/extra"])
    second = lifecycle.resolve(["queries/extra"])
    assert first is not second
    assert len(factory.calls) == 2
    assert lifecycle.cached_keys == []


def test_cached_transient_classifiers_are_keyed_by_ordered_sources() -> None:
    lifecycle, factory = _lifecycle(cache_transient=True)
    first = lifecycle.resolve(["b", "a"])
    second = lifecycle.resolve(["a", "b"])
    again = lifecycle.resolve(["b", "a", "b"])
    assert first is not second
    assert again is first
    assert [queries[len(BASE_QUERIES) :] for _, queries in factory.calls] == [
        (Path("b"), Path("a")),
        (Path("a"), Path("b")),
    ]
    assert lifecycle.cached_keys == [("a", "b"), ("b", "a")]


def test_transient_builds_are_reported(emitter) -> None:
    lifecycle, _ = _lifecycle(emitter=emitter)
    lifecycle.resolve()
    lifecycle.resolve(["extra"])
    assert emitter.events == [
        ("highlighter_transient", {"query_paths": ["extra"], "cached": False})
    ]


def test_acquire_yields_the_resolved_classifier() -> None:
    lifecycle, _ = _lifecycle(serialize=True)
    with lifecycle.acquire() as classifier:
        assert classifier is lifecycle.shared
    with lifecycle.acquire(["extra"]) as classifier:
        assert classifier is not lifecycle.shared


def test_clear_forgets_built_classifiers() -> None:
    lifecycle, factory = _lifecycle(cache_transient=True)
    lifecycle.resolve()
    lifecycle.resolve(["extra"])
    lifecycle.clear()
    lifecycle.resolve()
    assert lifecycle.cached_keys == []
    assert len(factory.calls) == 3


def test_cache_key_keeps_order_and_drops_duplicates() -> None:
    assert transient_cache_key([Path("b"), "a", "b"]) == ("b", "a")
