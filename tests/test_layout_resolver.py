"""Tests for layout document parsing and resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import write_skin
from nowplaying.errors import DocumentError, ErrorCode, SkinEngineError
from nowplaying.skins import layout_resolver
from nowplaying.skins.layout_document import parse_layout_document
from nowplaying.skins.layout_resolver import parse_align, parse_component, resolve_layout
from nowplaying.skins.loader import load_layout_from_dir
from nowplaying.skins.models import (
    ColumnNode,
    ComponentNode,
    LayoutAlign,
    LayoutComponent,
    RowNode,
    SpacerNode,
)


def _component(component_id: str, **extra) -> dict:
    return {"type": "component", "id": component_id, **extra}


def _resolve(variants: list[dict], default: str | None = None):
    layout: dict = {"variants": variants}
    if default is not None:
        layout["default"] = default
    warnings: list[str] = []
    result = resolve_layout(parse_layout_document({"meta": {"engine": "1"}, "layout": layout}), warnings)
    return result, warnings


def test_duplicate_variant_ids_keep_first() -> None:
    layout, warnings = _resolve(
        [
            {"id": "main", "structure": _component("title")},
            {"id": "main", "structure": _component("artwork")},
        ]
    )
    assert [variant.id for variant in layout.variants] == ["main"]
    assert layout.variants[0].root == ComponentNode(LayoutComponent.TITLE)
    assert "Duplicate layout variant id 'main'; skipping" in warnings


def test_blank_ids_get_positional_placeholders() -> None:
    layout, _ = _resolve(
        [
            {"id": "  ", "structure": _component("title")},
            {"display_name": " Compact ", "structure": _component("title")},
        ]
    )
    assert [(v.id, v.display_name) for v in layout.variants] == [
        ("variant_0", "variant_0"),
        ("variant_1", "Compact"),
    ]


def test_empty_containers_are_pruned_with_breadcrumb() -> None:
    layout, warnings = _resolve(
        [
            {
                "id": "a",
                "structure": {
                    "type": "row",
                    "children": [
                        {"type": "column", "children": [_component("bogus")]},
                        _component("title"),
                    ],
                },
            }
        ]
    )
    root = layout.variants[0].root
    assert isinstance(root, RowNode)
    assert root.children == (ComponentNode(LayoutComponent.TITLE),)
    assert "Unknown component 'bogus' in variant 'a' > child #0 > child #0; skipping" in warnings
    assert "variant 'a' > child #0 has no visible children" in warnings


def test_declared_default_must_match_a_surviving_variant() -> None:
    variants = [
        {"id": "a", "structure": _component("title")},
        {"id": "b", "structure": _component("title")},
    ]
    assert _resolve(variants, default=" b ")[0].default_variant == "b"
    assert _resolve(variants, default="zzz")[0].default_variant == "a"
    assert _resolve(variants)[0].default_variant == "a"


def test_variant_without_structure_or_content_is_skipped() -> None:
    layout, warnings = _resolve(
        [
            {"id": "nothing"},
            {"id": "hidden", "structure": _component("title", visible=False)},
            {"id": "ok", "structure": _component("title")},
        ]
    )
    assert [variant.id for variant in layout.variants] == ["ok"]
    assert "Layout variant 0 is missing structure; skipping" in warnings
    assert "Layout variant 'hidden' resolved to no visible content; skipping" in warnings


def test_container_defaults_and_alignment() -> None:
    layout, _ = _resolve(
        [
            {
                "id": "a",
                "structure": {
                    "type": "Column",
                    "align": "Middle",
                    "spacing": -4,
                    "children": [
                        {"type": "row", "align": "diagonal", "fill": True, "children": [_component("title")]},
                    ],
                },
            }
        ]
    )
    root = layout.variants[0].root
    assert isinstance(root, ColumnNode)
    assert root.align is LayoutAlign.CENTER
    assert root.spacing == 0.0
    assert root.fill is False
    row = root.children[0]
    assert isinstance(row, RowNode)
    assert row.align is LayoutAlign.START
    assert row.spacing == 8.0
    assert row.fill is True


def test_hidden_container_drops_subtree_silently() -> None:
    layout, warnings = _resolve(
        [
            {
                "id": "a",
                "structure": {
                    "type": "row",
                    "children": [
                        {"type": "column", "visible": False, "children": [_component("bogus")]},
                        _component("title"),
                    ],
                },
            }
        ]
    )
    assert layout.variants[0].root.children == (ComponentNode(LayoutComponent.TITLE),)
    assert warnings == []


def test_spacers_default_clamp_and_drop() -> None:
    layout, warnings = _resolve(
        [
            {
                "id": "a",
                "structure": {
                    "type": "row",
                    "children": [
                        {"type": "spacer"},
                        {"type": "spacer", "size": 0},
                        {"type": "spacer", "size": -5},
                        {"type": "spacer", "size": 2.5},
                        _component("title"),
                    ],
                },
            }
        ]
    )
    assert layout.variants[0].root.children == (
        SpacerNode(8.0),
        SpacerNode(2.5),
        ComponentNode(LayoutComponent.TITLE),
    )
    assert warnings == []


def test_component_missing_id_and_params() -> None:
    layout, warnings = _resolve(
        [
            {
                "id": "a",
                "structure": {
                    "type": "row",
                    "children": [
                        {"type": "component"},
                        _component("controls", params={"centered": True, "scale": 2}),
                    ],
                },
            }
        ]
    )
    assert "variant 'a' > child #0 component missing id" in warnings
    assert layout.variants[0].root.children == (
        ComponentNode(
            LayoutComponent.PLAYBACK_CONTROLS_GROUP,
            {"centered": "true", "scale": "2"},
        ),
    )


@pytest.mark.parametrize(
    ("alias", "expected"),
    [
        ("Artwork", LayoutComponent.THUMBNAIL),
        ("thumbnail", LayoutComponent.THUMBNAIL),
        ("details", LayoutComponent.METADATA_GROUP),
        ("metadata.artist", LayoutComponent.METADATA_ARTIST),
        ("album", LayoutComponent.METADATA_ALBUM),
        ("playstate", LayoutComponent.METADATA_STATE),
        ("controls", LayoutComponent.PLAYBACK_CONTROLS_GROUP),
        ("previous", LayoutComponent.PLAYBACK_BUTTON_PREVIOUS),
        (" BUTTON.PLAY ", LayoutComponent.PLAYBACK_BUTTON_PLAY_PAUSE),
        ("playpause", LayoutComponent.PLAYBACK_BUTTON_PLAY_PAUSE),
        ("button.pause", LayoutComponent.PLAYBACK_BUTTON_PLAY_PAUSE),
        ("next", LayoutComponent.PLAYBACK_BUTTON_NEXT),
        ("stop", LayoutComponent.PLAYBACK_BUTTON_STOP),
        ("progress", LayoutComponent.TIMELINE),
        ("warnings", LayoutComponent.SKIN_WARNINGS),
        ("skin_error", LayoutComponent.SKIN_ERROR),
        ("error", LayoutComponent.NOW_PLAYING_ERROR),
        ("thumbnail_error", LayoutComponent.THUMBNAIL_ERROR),
    ],
)
def test_component_aliases(alias: str, expected: LayoutComponent) -> None:
    assert parse_component(alias) is expected


def test_unknown_alias_and_alignment() -> None:
    assert parse_component("equalizer") is None
    assert parse_align(" Bottom ") is LayoutAlign.END
    assert parse_align("sideways") is None
    assert LayoutComponent.PLAYBACK_BUTTON_STOP.renders_nothing
    assert not LayoutComponent.TITLE.renders_nothing


def test_all_variants_failing_uses_builtin_layout() -> None:
    layout, warnings = _resolve([{"id": "a", "structure": _component("nope")}])
    assert [variant.id for variant in layout.variants] == ["art_left", "art_right", "art_top"]
    assert layout.default_variant == "art_left"
    assert any("nope" in warning for warning in warnings)


def test_builtin_layout_without_variants_is_fatal(monkeypatch) -> None:
    empty = parse_layout_document({"meta": {"engine": "1"}, "layout": {"variants": []}})
    monkeypatch.setattr(layout_resolver, "builtin_layout_document", lambda: empty)
    with pytest.raises(SkinEngineError) as excinfo:
        resolve_layout(empty, [])
    assert excinfo.value.code is ErrorCode.BUILTIN_BROKEN


def test_builtin_art_top_carries_centered_params() -> None:
    layout, _ = _resolve([])
    art_top = layout.get("art_top")
    assert art_top is not None
    params = [child.params for child in art_top.root.children if isinstance(child, ComponentNode)]
    assert {"centered": "true"} in params


@pytest.mark.parametrize(
    "structure",
    [
        {"type": "grid"},
        {"id": "title"},
        {"type": "row", "children": "title"},
        {"type": "spacer", "size": "big"},
        {"type": "component", "id": "title", "params": {"nested": {"a": 1}}},
    ],
)
def test_malformed_nodes_raise_document_error(structure: dict) -> None:
    with pytest.raises(DocumentError):
        parse_layout_document({"layout": {"variants": [{"id": "a", "structure": structure}]}})


class TestLoadLayoutFromDir:
    def test_missing_file_uses_builtin(self, tmp_path: Path) -> None:
        loaded = load_layout_from_dir(write_skin(tmp_path, "empty"))
        assert loaded.layout.default_variant == "art_left"
        assert any("missing layout.toml" in warning for warning in loaded.warnings)

    def test_unknown_node_type_falls_back(self, tmp_path: Path) -> None:
        skin_dir = write_skin(
            tmp_path,
            "grid",
            layout='[meta]\nengine = "1"\n[[layout.variants]]\nid = "x"\n'
            '[layout.variants.structure]\ntype = "grid"\n',
        )
        loaded = load_layout_from_dir(skin_dir)
        assert loaded.layout.get("art_left") is not None
        assert any("Failed to parse layout" in warning for warning in loaded.warnings)

    def test_engine_gate(self, tmp_path: Path) -> None:
        body = '[[layout.variants]]\nid = "solo"\n[layout.variants.structure]\ntype = "component"\nid = "title"\n'
        mismatched = load_layout_from_dir(
            write_skin(tmp_path, "v2", layout='[meta]\nengine = "2"\n' + body)
        )
        assert mismatched.layout.get("solo") is None
        assert any("does not match" in warning for warning in mismatched.warnings)

        missing = load_layout_from_dir(write_skin(tmp_path, "v0", layout=body))
        assert [variant.id for variant in missing.layout.variants] == ["solo"]
        assert any("engine missing" in warning for warning in missing.warnings)
