#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Copy text formatting.

Builds the text placed on the clipboard for an item according to the
selected preset and the copy toggles. Output is plain text, LaTeX or
Markdown; nothing is escaped or rendered.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List

from quicksheet.models import CopyPreset, CopyToggles, Item, ItemKind


@dataclass
class _Parts:
    """Item fields after applying the toggles ("" when switched off)."""
    name: str
    symbol: str
    text: str
    category: str
    source: str

    @property
    def name_with_symbol(self) -> str:
        if self.symbol:
            return f"{self.name} ({self.symbol})" if self.name else self.symbol
        return self.name

    @property
    def meta(self) -> str:
        return " | ".join(p for p in (self.category, self.source) if p)


def _parts(item: Item, t: CopyToggles) -> _Parts:
    return _Parts(
        name=item.name if t.include_name else "",
        symbol=item.symbol if t.include_symbol and item.symbol else "",
        text=item.text if t.include_text and item.text else "",
        category=item.category if t.include_category and item.category else "",
        source=item.source if t.include_source and item.source else "",
    )


def comment(s: str) -> str:
    return f"/* {s} */" if s else ""


def _units_suffix(item: Item, t: CopyToggles) -> str:
    return f" {item.units}" if t.include_units and item.units else ""


def _constant_line(item: Item, t: CopyToggles, lhs: str) -> str:
    units = _units_suffix(item, t)
    if item.value:
        return f"{lhs} = {item.value}{units}" if lhs else f"{item.value}{units}"
    return lhs


def _plain_compact(item: Item, t: CopyToggles) -> str:
    p = _parts(item, t)
    lhs = p.name_with_symbol.strip()
    pieces: List[str] = []
    if item.kind == ItemKind.CONSTANT:
        pieces.append(_constant_line(item, t, lhs))
    else:
        eq = item.latex or item.text
        pieces.append(f"{lhs}: {eq}" if lhs and eq else eq or lhs)
    if p.text and p.text != item.latex:
        pieces.append(f"– {p.text}")
    pieces.append(comment(p.meta))
    return " ".join(x for x in pieces if x)


def _plain_verbose(item: Item, t: CopyToggles) -> str:
    p = _parts(item, t)
    lhs = p.name_with_symbol.strip()
    pieces: List[str] = []
    if item.kind == ItemKind.CONSTANT:
        pieces.append(_constant_line(item, t, lhs))
        if p.text:
            pieces.append(f"Note: {p.text}")
    else:
        body = item.latex or item.text
        if body:
            pieces.append(f"{lhs}: {body}" if lhs else body)
        else:
            pieces.append(lhs)
    pieces.append(comment(p.meta))
    return "\n".join(x for x in pieces if x)


def _latex(item: Item, t: CopyToggles, symbol_first: bool) -> str:
    p = _parts(item, t)
    if symbol_first and item.symbol:
        lhs = item.symbol
    else:
        lhs = (p.name or item.symbol or "").strip()

    if item.kind == ItemKind.CONSTANT:
        units = f"\\,\\text{{{item.units}}}" if t.include_units and item.units else ""
        if item.value:
            eq = f"{lhs} = {item.value}{units}" if lhs else f"{item.value}{units}"
        else:
            eq = lhs
    else:
        eq = item.latex or item.text or lhs
    return " ".join(x for x in (eq, comment(p.text)) if x)


def _markdown_inline(item: Item, t: CopyToggles) -> str:
    p = _parts(item, t)
    label = p.name or item.symbol or ""
    if item.kind == ItemKind.CONSTANT:
        base = f"**{label}**"
        if item.value:
            base += f" = `{item.value}`"
        base += _units_suffix(item, t)
    else:
        base = f"**{label}**"
        if item.latex:
            base += f": `${item.latex}$`"
        elif item.text:
            base += f" — {item.text}"
    return base + (f"\n\n> {p.meta}" if p.meta else "")


def _markdown_fenced(item: Item, t: CopyToggles) -> str:
    p = _parts(item, t)
    head = f"**{p.name_with_symbol or item.symbol or ''}**"
    if p.text:
        head += f" — {p.text}"
    if item.latex:
        body = f"\n\n```tex\n{item.latex}\n```"
    elif item.value:
        body = f"\n\n`{item.value}`{_units_suffix(item, t)}"
    else:
        body = ""
    return head + body + (f"\n\n> {p.meta}" if p.meta else "")


_BUILDERS: Dict[CopyPreset, Callable[[Item, CopyToggles], str]] = {
    CopyPreset.PLAIN_COMPACT: _plain_compact,
    CopyPreset.PLAIN_VERBOSE: _plain_verbose,
    CopyPreset.LATEX_INLINE: lambda i, t: _latex(i, t, symbol_first=False),
    CopyPreset.LATEX_INLINE_SYMBOL_FIRST: lambda i, t: _latex(i, t, symbol_first=True),
    CopyPreset.MARKDOWN_INLINE: _markdown_inline,
    CopyPreset.MARKDOWN_FENCED: _markdown_fenced,
}


def build_copy(item: Item, preset: CopyPreset, toggles: CopyToggles) -> str:
    """Build clipboard text for an item.

    Args:
        item: Item to copy
        preset: Output format
        toggles: Which optional parts to include

    Returns:
        Formatted text; the item name for an unknown preset.
    """
    builder = _BUILDERS.get(preset)
    if builder is None:
        return item.name
    return builder(item, toggles)


def value_only(item: Item) -> str:
    """Just the value and units of a constant ("" for equations)."""
    if not item.value:
        return ""
    return f"{item.value} {item.units}" if item.units else item.value
