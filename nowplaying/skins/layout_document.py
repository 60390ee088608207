"""Raw layout document schema."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from nowplaying.errors import DocumentError
from nowplaying.skins.constants import MAX_LAYOUT_DEPTH


@dataclass(frozen=True, slots=True)
class RawContainer:
    kind: str
    align: str | None = None
    spacing: float | None = None
    fill: bool | None = None
    visible: bool | None = None
    children: tuple[RawNode, ...] = ()


@dataclass(frozen=True, slots=True)
class RawComponent:
    id: str | None = None
    visible: bool | None = None
    params: dict[str, str] | None = None


@dataclass(frozen=True, slots=True)
class RawSpacer:
    size: float | None = None


RawNode = Union[RawContainer, RawComponent, RawSpacer]


@dataclass(frozen=True, slots=True)
class RawVariant:
    id: str | None = None
    display_name: str | None = None
    structure: RawNode | None = None


@dataclass(frozen=True, slots=True)
class RawLayoutDocument:
    engine: str | None = None
    default: str | None = None
    variants: tuple[RawVariant, ...] = field(default_factory=tuple)


_CONTAINER_KINDS = ("row", "column")


def parse_layout_document(data: Mapping[str, Any]) -> RawLayoutDocument:
    """Build a RawLayoutDocument from decoded TOML. Unknown keys are ignored."""
    meta = _table(data, "meta", "")
    layout = _table(data, "layout", "")
    raw_variants = layout.get("variants", [])
    if not isinstance(raw_variants, list):
        raise DocumentError("layout.variants must be an array of tables")

    variants: list[RawVariant] = []
    for index, entry in enumerate(raw_variants):
        context = f"layout.variants[{index}]"
        if not isinstance(entry, Mapping):
            raise DocumentError(f"{context} must be a table")
        structure = entry.get("structure")
        variants.append(
            RawVariant(
                id=_opt_str(entry, "id", context),
                display_name=_opt_str(entry, "display_name", context),
                structure=None if structure is None else _node(structure, f"{context}.structure"),
            )
        )

    return RawLayoutDocument(
        engine=_opt_str(meta, "engine", "meta"),
        default=_opt_str(layout, "default", "layout"),
        variants=tuple(variants),
    )


def _node(data: Any, context: str, depth: int = 1) -> RawNode:
    if not isinstance(data, Mapping):
        raise DocumentError(f"{context} must be a table")
    kind = data.get("type")
    if not isinstance(kind, str):
        raise DocumentError(f"{context} is missing 'type'")
    kind = kind.strip().lower()

    if kind in _CONTAINER_KINDS:
        if depth >= MAX_LAYOUT_DEPTH:
            raise DocumentError(f"{context} nests containers deeper than {MAX_LAYOUT_DEPTH} levels")
        raw_children = data.get("children", [])
        if not isinstance(raw_children, list):
            raise DocumentError(f"{context}.children must be an array of tables")
        return RawContainer(
            kind=kind,
            align=_opt_str(data, "align", context),
            spacing=_opt_number(data, "spacing", context),
            fill=_opt_bool(data, "fill", context),
            visible=_opt_bool(data, "visible", context),
            children=tuple(
                _node(child, f"{context}.children[{index}]", depth + 1)
                for index, child in enumerate(raw_children)
            ),
        )
    if kind == "component":
        return RawComponent(
            id=_opt_str(data, "id", context),
            visible=_opt_bool(data, "visible", context),
            params=_params(data, context),
        )
    if kind == "spacer":
        return RawSpacer(size=_opt_number(data, "size", context))
    raise DocumentError(f"{context} has unknown node type {kind!r}")


def _params(data: Mapping[str, Any], context: str) -> dict[str, str] | None:
    raw = data.get("params")
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise DocumentError(f"{context}.params must be a table")
    params: dict[str, str] = {}
    for key, value in raw.items():
        if isinstance(value, bool):
            params[str(key)] = "true" if value else "false"
        elif isinstance(value, (str, int, float)):
            params[str(key)] = str(value)
        else:
            raise DocumentError(f"{context}.params.{key} must be a string")
    return params


def _table(data: Mapping[str, Any], key: str, context: str) -> Mapping[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise DocumentError(f"{_dotted(context, key)} must be a table")
    return value


def _opt_str(data: Mapping[str, Any], key: str, context: str) -> str | None:
    value = data.get(key)
    if value is None or isinstance(value, str):
        return value
    raise DocumentError(f"{_dotted(context, key)} must be a string")


def _opt_bool(data: Mapping[str, Any], key: str, context: str) -> bool | None:
    value = data.get(key)
    if value is None or isinstance(value, bool):
        return value
    raise DocumentError(f"{_dotted(context, key)} must be a boolean")


def _opt_number(data: Mapping[str, Any], key: str, context: str) -> float | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    raise DocumentError(f"{_dotted(context, key)} must be a number")


def _dotted(context: str, key: str) -> str:
    return f"{context}.{key}" if context else key
