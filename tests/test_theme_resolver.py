"""Tests for theme loading and resolution."""

from __future__ import annotations

from pathlib import Path

from conftest import write_skin
from nowplaying.skins.loader import load_theme_from_dir
from nowplaying.skins.models import (
    CircleThumb,
    GradientBackground,
    GradientDirection,
    ImageThumb,
    SolidBackground,
)
from nowplaying.skins.values import TRANSPARENT, Color

ACCENT = Color(0x4C, 0x8D, 0xFF)


def _theme(tmp_path: Path, body: str, *, engine: str | None = "1", skin_id: str = "test"):
    header = f'[meta]\nengine = "{engine}"\n' if engine is not None else ""
    skin_dir = write_skin(tmp_path, skin_id, theme=header + body)
    return load_theme_from_dir(skin_dir)


def test_empty_skin_resolves_builtin_theme(tmp_path: Path) -> None:
    loaded = load_theme_from_dir(write_skin(tmp_path, "empty"))
    theme = loaded.theme
    assert any("missing theme.toml" in warning for warning in loaded.warnings)
    assert theme.name == "empty"
    assert theme.display_name == "empty"
    assert theme.engine_version == "1"
    assert theme.asset_root == tmp_path / "empty" / "assets"
    assert theme.use_gradient is True
    assert theme.transparent_background is False
    root = theme.components.root
    assert root.background == SolidBackground(Color(0x15, 0x16, 0x1B))
    assert root.border_radius == 18.0
    assert root.show_border is False
    button = theme.components.button
    assert button.border_color == Color(76, 141, 255, 115)
    assert button.border_radius == 26.0
    slider = theme.components.slider
    assert slider.thumb == CircleThumb(color=ACCENT, radius=10.0)
    assert slider.track_thickness == 4.0
    assert theme.components.text_title.size == 20.0
    assert theme.components.text_body.color == Color(0x9E, 0xA7, 0xB8)
    assert theme.components.thumbnail.overlays == ()


def test_meta_names_and_flags(tmp_path: Path) -> None:
    loaded = _theme(
        tmp_path,
        'name = "neon"\ndisplay_name = "Neon Nights"\ndisable_vinyl_thumbnail = true\n'
        "transparent_background = true\n",
    )
    theme = loaded.theme
    assert theme.name == "neon"
    assert theme.display_name == "Neon Nights"
    assert theme.disable_vinyl_thumbnail is True
    assert theme.transparent_background is True
    assert loaded.warnings == ()


def test_top_level_transparent_background_wins_over_meta(tmp_path: Path) -> None:
    body = "transparent_background = true\n"
    skin_dir = write_skin(
        tmp_path,
        "clear",
        theme='transparent_background = false\n[meta]\nengine = "1"\n' + body,
    )
    assert load_theme_from_dir(skin_dir).theme.transparent_background is False


def test_mismatched_engine_discards_overlay(tmp_path: Path) -> None:
    loaded = _theme(tmp_path, '[colors]\nbackground = "#ff0000"\n', engine="2")
    assert any("does not match" in warning for warning in loaded.warnings)
    assert loaded.theme.components.root.background == SolidBackground(Color(0x15, 0x16, 0x1B))


def test_missing_engine_warns_but_merges(tmp_path: Path) -> None:
    loaded = _theme(tmp_path, '[colors]\nbackground = "#ff0000"\n', engine=None)
    assert any("meta.engine missing" in warning for warning in loaded.warnings)
    assert loaded.theme.components.root.background == SolidBackground(Color(255, 0, 0))


def test_malformed_toml_falls_back_with_warning(tmp_path: Path) -> None:
    skin_dir = write_skin(tmp_path, "broken", theme="[colors\nnot toml")
    loaded = load_theme_from_dir(skin_dir)
    assert any("Failed to parse theme" in warning for warning in loaded.warnings)
    assert loaded.theme.display_name == "broken"


def test_gradient_background_and_degenerate_collapse(tmp_path: Path) -> None:
    loaded = _theme(
        tmp_path,
        "[components.root.background]\n"
        'type = "Gradient"\nstart = "#000000"\nend = "#ffffff"\ndirection = "horizontal"\n'
        "[components.panel.background]\n"
        'start = "#112233"\nend = "#112233"\n',
    )
    components = loaded.theme.components
    assert components.root.background == GradientBackground(
        start=Color(0, 0, 0), end=Color(255, 255, 255), direction=GradientDirection.HORIZONTAL
    )
    assert components.root.background_color == Color(0, 0, 0)
    assert components.panel.background == SolidBackground(Color(0x11, 0x22, 0x33))


def test_invalid_background_tables_fall_back_to_dark_fill(tmp_path: Path) -> None:
    loaded = _theme(
        tmp_path,
        '[components.root.background]\ntype = "solid"\n'
        '[components.panel.background]\ntype = "pattern"\ncolor = "#ffffff"\n',
    )
    components = loaded.theme.components
    assert components.root.background == SolidBackground(Color(32, 32, 32))
    assert components.panel.background == SolidBackground(Color(32, 32, 32))
    assert any("Solid background requires" in warning for warning in loaded.warnings)
    assert any("Unknown background type 'pattern'" in warning for warning in loaded.warnings)


def test_show_border_derived_from_width_and_color(tmp_path: Path) -> None:
    loaded = _theme(
        tmp_path,
        '[components.root]\nborder_width = "2"\nborder_color = "#ff0000"\n'
        '[components.panel]\nborder_width = "2"\nborder_color = "#ff0000"\nshow_border = false\n',
    )
    components = loaded.theme.components
    assert components.root.show_border is True
    assert components.root.border_width == 2.0
    assert components.panel.show_border is False


def test_tokens_bare_names_and_bad_colors(tmp_path: Path) -> None:
    loaded = _theme(
        tmp_path,
        '[colors]\nhighlight = "{colors.accent}"\n'
        '[components.text.title]\ncolor = "highlight"\n'
        '[components.text.body]\ncolor = "not-a-color"\n',
    )
    components = loaded.theme.components
    assert loaded.theme.colors["highlight"] == ACCENT
    assert components.text_title.color == ACCENT
    assert components.text_body.color == TRANSPARENT
    assert any("not-a-color" in warning for warning in loaded.warnings)


def test_unparsable_color_and_var_entries(tmp_path: Path) -> None:
    loaded = _theme(tmp_path, '[colors]\nbackground = "bogus"\n[vars]\nradius = "big"\n')
    theme = loaded.theme
    assert theme.colors["background"] == Color(255, 255, 255)
    assert "radius" not in theme.vars
    assert "Variable radius could not be parsed as number: big" in loaded.warnings
    assert "Could not parse number value: big" in loaded.warnings
    assert theme.components.root.border_radius == 8.0


def test_negative_sizes_are_clamped(tmp_path: Path) -> None:
    loaded = _theme(tmp_path, '[components.thumbnail]\nstroke_width = "-3"\n')
    assert loaded.theme.components.thumbnail.stroke_width == 0.0


def test_image_thumb_missing_asset_reverts_to_circle(tmp_path: Path) -> None:
    loaded = _theme(tmp_path, '[components.slider]\nthumb_shape = "IMAGE"\nthumb_image = "knob.png"\n')
    assert loaded.theme.components.slider.thumb == CircleThumb(color=ACCENT, radius=10.0)
    assert any(
        "knob.png" in warning and "reverting to circle thumb" in warning
        for warning in loaded.warnings
    )


def test_image_thumb_without_image_name(tmp_path: Path) -> None:
    loaded = _theme(tmp_path, '[components.slider]\nthumb_shape = "image"\n')
    assert isinstance(loaded.theme.components.slider.thumb, CircleThumb)
    assert "Slider thumb image requested but no image provided" in loaded.warnings


def test_image_thumb_with_existing_asset(tmp_path: Path) -> None:
    skin_dir = write_skin(
        tmp_path,
        "knobby",
        theme='[meta]\nengine = "1"\n[components.slider]\n'
        'thumb_shape = "image"\nthumb_image = "knob.png"\nthumb_size = "30"\n',
    )
    (skin_dir / "assets").mkdir()
    (skin_dir / "assets" / "knob.png").write_bytes(b"png")
    thumb = load_theme_from_dir(skin_dir).theme.components.slider.thumb
    assert thumb == ImageThumb(
        color=ACCENT,
        path=(skin_dir / "assets" / "knob.png").resolve(),
        size=30.0,
    )


def test_thumbnail_overlays(tmp_path: Path) -> None:
    skin_dir = write_skin(
        tmp_path,
        "framed",
        theme='[meta]\nengine = "1"\n[components.thumbnail]\n'
        'border_image = "frame.png"\n'
        'overlay_images = ["ring.png", { path = "missing.png" }, "  ", '
        '{ path = "ring.png", offset_x = "4", offset_y = "abc" }]\n',
    )
    assets = skin_dir / "assets"
    assets.mkdir()
    (assets / "ring.png").write_bytes(b"png")
    (assets / "frame.png").write_bytes(b"png")

    loaded = load_theme_from_dir(skin_dir)
    overlays = loaded.theme.components.thumbnail.overlays
    assert [overlay.path.name for overlay in overlays] == ["ring.png", "ring.png", "frame.png"]
    assert (overlays[1].offset_x, overlays[1].offset_y) == (4.0, 0.0)
    assert (overlays[2].offset_x, overlays[2].offset_y) == (0.0, 0.0)
    assert any("missing.png" in warning and "skipping" in warning for warning in loaded.warnings)
    assert "Could not parse thumbnail overlay offset_y: abc; using 0" in loaded.warnings


def test_circular_tokens_terminate(tmp_path: Path) -> None:
    loaded = _theme(tmp_path, '[colors]\na = "{colors.b}"\nb = "{colors.a}"\n')
    assert any("circular" in warning for warning in loaded.warnings)
    assert loaded.theme.colors["a"] == Color(255, 255, 255)


def test_resolution_is_deterministic(tmp_path: Path) -> None:
    skin_dir = write_skin(tmp_path, "same", theme='[meta]\nengine = "1"\n[vars]\nradius = "4"\n')
    assert load_theme_from_dir(skin_dir) == load_theme_from_dir(skin_dir)


def test_asset_paths_cannot_escape_assets_dir(tmp_path: Path) -> None:
    secret = tmp_path / "secret.png"
    secret.write_bytes(b"png")
    skin_dir = write_skin(
        tmp_path,
        "escape",
        theme='[meta]\nengine = "1"\n[components.slider]\n'
        'thumb_shape = "image"\nthumb_image = "../../secret.png"\n'
        "[components.thumbnail]\n"
        f"overlay_images = [{str(secret)!r}, \"../theme.toml\"]\n",
    )
    (skin_dir / "assets").mkdir()

    loaded = load_theme_from_dir(skin_dir)
    assert isinstance(loaded.theme.components.slider.thumb, CircleThumb)
    assert loaded.theme.components.thumbnail.overlays == ()
    outside = [warning for warning in loaded.warnings if "is outside" in warning]
    assert len(outside) == 3
