"""Cascading merge of a user theme document over the built-in baseline."""

from __future__ import annotations

from dataclasses import fields
from typing import TypeVar

from nowplaying.skins.theme_document import RawThemeDocument, Section

_S = TypeVar("_S", bound=Section)


def merge_theme_documents(base: RawThemeDocument, overlay: RawThemeDocument) -> RawThemeDocument:
    """Return `base` with every field `overlay` sets taking precedence.

    Leaves: the overlay value wins when it is not None.
    Nested sections: merged recursively with the same rule.
    `colors` / `vars`: overlay entries are inserted or replace base entries;
    base entries the overlay does not mention are kept.
    """
    return merge_section(base, overlay)


def merge_section(base: _S, overlay: _S) -> _S:
    values = {}
    for item in fields(base):
        base_value = getattr(base, item.name)
        overlay_value = getattr(overlay, item.name)
        if isinstance(base_value, Section):
            values[item.name] = merge_section(base_value, overlay_value)
        elif isinstance(base_value, dict):
            merged = dict(base_value)
            merged.update(overlay_value)
            values[item.name] = merged
        else:
            values[item.name] = base_value if overlay_value is None else overlay_value
    return type(base)(**values)
