"""Token substitution for `{colors.*}` / `{vars.*}` placeholders.

Tokens are resolved by repeated, non-recursive substitution capped at
MAX_TOKEN_PASSES. Circular references therefore stop when the cap is hit and
leave the remaining placeholder text in place. Expansion also stops before a
value grows past MAX_TOKEN_VALUE_LENGTH, so self-duplicating values stay bounded.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping

from nowplaying.skins.constants import MAX_TOKEN_PASSES, MAX_TOKEN_VALUE_LENGTH, TOKEN_NAMESPACES

_TOKEN_RE = re.compile(r"\{(" + "|".join(TOKEN_NAMESPACES) + r")\.([^{}]+)\}")


@dataclass(slots=True)
class TokenContext:
    """Raw string values for the `colors` and `vars` namespaces."""

    colors: dict[str, str] = field(default_factory=dict)
    vars: dict[str, str] = field(default_factory=dict)

    def lookup(self, namespace: str, key: str) -> str | None:
        if namespace == "colors":
            return self.colors.get(key)
        if namespace == "vars":
            return self.vars.get(key)
        return None


def substitute_once(value: str, context: TokenContext) -> str:
    """Replace every known token once; replacement text is not rescanned."""

    def _replace(match: re.Match[str]) -> str:
        found = context.lookup(match.group(1), match.group(2))
        return match.group(0) if found is None else found

    return _TOKEN_RE.sub(_replace, value)


def resolve_tokens(
    value: str,
    context: TokenContext,
    warnings: list[str] | None = None,
) -> str:
    """Resolve tokens in a field value, following multi-hop chains.

    When `warnings` is given, one message is appended per placeholder that is
    still present after the final pass, or a single message when expansion
    was stopped at MAX_TOKEN_VALUE_LENGTH.
    """
    out, overflowed = _expand(value, context)
    if warnings is not None:
        if overflowed:
            warnings.append(_overflow_message(value))
        else:
            warnings.extend(describe_unresolved(out, context))
    return out


def _expand(value: str, context: TokenContext) -> tuple[str, bool]:
    """Substitute up to MAX_TOKEN_PASSES times; stop before exceeding the length cap."""
    out = value
    for _ in range(MAX_TOKEN_PASSES):
        resolved = substitute_once(out, context)
        if resolved == out:
            return out, False
        if len(resolved) > MAX_TOKEN_VALUE_LENGTH:
            return out, True
        out = resolved
    return out, False


def _overflow_message(owner: str) -> str:
    return (
        f"Token expansion of {owner} exceeds {MAX_TOKEN_VALUE_LENGTH} characters; "
        "left unresolved"
    )


def describe_unresolved(value: str, context: TokenContext, *, owner: str = "") -> list[str]:
    messages: list[str] = []
    where = f" in {owner}" if owner else ""
    for match in _TOKEN_RE.finditer(value):
        token = match.group(0)
        if context.lookup(match.group(1), match.group(2)) is None:
            messages.append(f"Unknown token {token}{where}")
        else:
            messages.append(
                f"Token {token}{where} did not resolve after {MAX_TOKEN_PASSES} passes "
                "(circular reference?)"
            )
    return messages


def build_token_context(
    colors: Mapping[str, str],
    vars: Mapping[str, str],
    warnings: list[str] | None = None,
) -> TokenContext:
    """Resolve the `colors` and `vars` namespaces against each other.

    Every pass re-resolves each raw value against the current context and
    stores the result in place; iteration stops early once a pass changes
    nothing. Warnings are only emitted for placeholders left after the last
    pass. A value whose expansion outgrows MAX_TOKEN_VALUE_LENGTH keeps its
    last bounded text and is reported once.
    """
    context = TokenContext(colors=dict(colors), vars=dict(vars))
    overflowed: set[str] = set()
    for _ in range(MAX_TOKEN_PASSES):
        changed = False
        for namespace, raw_values, resolved_values in (
            ("colors", colors, context.colors),
            ("vars", vars, context.vars),
        ):
            for key, raw in raw_values.items():
                resolved, overflow = _expand(raw, context)
                if overflow:
                    overflowed.add(f"{namespace}.{key}")
                if resolved_values.get(key) != resolved:
                    resolved_values[key] = resolved
                    changed = True
        if not changed:
            break

    if warnings is not None:
        for namespace, values in (("colors", context.colors), ("vars", context.vars)):
            for key, value in values.items():
                owner = f"{namespace}.{key}"
                if owner in overflowed:
                    warnings.append(_overflow_message(owner))
                else:
                    warnings.extend(describe_unresolved(value, context, owner=owner))
    return context
