"""Tests for the optimization suggestion rule table."""

from __future__ import annotations

from perfaudit.analysis.suggestions import build_suggestions, node_suggestions, paint_preload
from perfaudit.model import RequestChainNode


def _node(
    url: str,
    resource_type: str,
    *,
    depth: int = 1,
    offset: float = 0.0,
    duration: float = 400.0,
    on_path: bool = True,
) -> RequestChainNode:
    return RequestChainNode(
        url=url,
        start_time_ms=offset,
        end_time_ms=offset + duration,
        duration_ms=duration,
        start_offset_ms=offset,
        transfer_size=0,
        depth=depth,
        resource_type=resource_type,
        on_critical_path=on_path,
    )


def test_late_paint_resource_gets_preload() -> None:
    hero = _node("https://a/hero.jpg", "Image", depth=2, offset=1800.0)

    suggestion = paint_preload(hero.url, [hero], [hero])

    assert suggestion is not None
    assert suggestion.kind == "preload"
    assert suggestion.priority == "high"
    assert suggestion.potential_saving_ms == 1300.0


def test_preload_saving_has_a_floor() -> None:
    hero = _node("https://a/hero.jpg", "Image", offset=1200.0)

    suggestion = paint_preload(hero.url, [hero], [hero])

    assert suggestion is not None
    assert suggestion.potential_saving_ms == 1000.0


def test_early_paint_resource_gets_no_preload() -> None:
    hero = _node("https://a/hero.jpg", "Image", offset=900.0)

    assert paint_preload(hero.url, [hero], [hero]) is None


def test_no_paint_url_gets_no_preload() -> None:
    doc = _node("https://a/", "Document", depth=0)

    assert paint_preload(None, [doc], [doc]) is None


def test_shallow_stylesheet_is_inlined() -> None:
    [suggestion] = node_suggestions(_node("https://a/s.css", "stylesheet", depth=1, duration=300.0))

    assert suggestion.kind == "inline"
    assert suggestion.potential_saving_ms == 150.0


def test_deep_stylesheet_is_not_inlined() -> None:
    assert node_suggestions(_node("https://a/s.css", "Stylesheet", depth=2)) == []


def test_only_scripts_off_the_path_are_deferred() -> None:
    off_path = node_suggestions(_node("https://a/t.js", "Script", depth=2, duration=500.0, on_path=False))
    on_path = node_suggestions(_node("https://a/app.js", "Script", depth=2, on_path=True))
    too_deep = node_suggestions(_node("https://a/late.js", "Script", depth=3, on_path=False))

    assert [(item.kind, item.potential_saving_ms) for item in off_path] == [("defer", 150.0)]
    assert on_path == []
    assert too_deep == []


def test_deep_nodes_are_prefetched() -> None:
    [suggestion] = node_suggestions(_node("https://a/deep.png", "Image", depth=5, duration=1000.0))

    assert suggestion.kind == "prefetch"
    assert suggestion.priority == "low"
    assert suggestion.potential_saving_ms == 200.0
    assert node_suggestions(_node("https://a/d4.png", "Image", depth=4)) == []


def test_suggestions_sorted_by_priority() -> None:
    deep = _node("https://a/deep.woff2", "Font", depth=6, offset=100.0)
    css = _node("https://a/s.css", "Stylesheet", depth=1, offset=200.0)
    hero = _node("https://a/hero.jpg", "Image", depth=2, offset=2500.0)
    timeline = [deep, css, hero]

    kinds = [item.kind for item in build_suggestions(hero.url, timeline, timeline)]

    assert kinds == ["preload", "inline", "prefetch"]
