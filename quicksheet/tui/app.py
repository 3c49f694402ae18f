#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Main TUI application for quicksheet.

Search-as-you-type over constants and equations:
- Search input re-ranks on every keystroke
- Category selector (All, Constants pinned, then table order)
- Results rendered by section, top result highlighted
- Enter copies the top result and records the use
"""

from typing import Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Footer, Header, Input, OptionList, Static
from textual.widgets.option_list import Option

from quicksheet.grouping import option_label
from quicksheet.manager import QuickSheet
from quicksheet.models import RankingMode, SearchResult
from quicksheet.tui.app_state import AppState


def render_result(result: SearchResult, max_rows: int = 200) -> Text:
    """Render sections as rich Text (no markup parsing of item content)."""
    text = Text()
    if not result.sections:
        text.append("(no results)", style="dim")
        return text

    scores = {s.item.id: s.score for s in result.ranked}
    top = result.top
    shown = 0
    for section in result.sections:
        if shown >= max_rows:
            break
        text.append(f"{section.category}\n", style="bold cyan")
        for item in section.items:
            if shown >= max_rows:
                break
            marker = "> " if top is not None and item.id == top.id else "  "
            text.append(marker, style="bold green")
            text.append(item.name, style="bold" if marker.strip() else "")
            if item.symbol:
                text.append(f" ({item.symbol})", style="magenta")
            body = item.latex or (f"{item.value} {item.units or ''}".strip() if item.value else "")
            if body:
                text.append(f"  {body}")
            text.append(f"  {scores.get(item.id, 0.0):.3f}\n", style="dim")
            shown += 1

    hidden = result.total - shown
    if hidden > 0:
        text.append(f"(+{hidden} more)", style="dim")
    return text


class QuickSheetApp(App):
    """
    Textual application for searching and copying reference items.
    """

    TITLE = "quicksheet"

    CSS = """
    #search-row {
        height: 3;
    }
    #search-input {
        width: 1fr;
    }
    #category-list {
        width: 24;
        height: 1fr;
    }
    #results-scroll {
        width: 1fr;
    }
    #status {
        height: 1;
        background: $panel;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("escape", "clear_query", "Clear", priority=True),
        # priority: the focused search Input would otherwise take these keys
        Binding("ctrl+r", "toggle_instant_rerank", "Instant re-rank", priority=True),
        Binding("ctrl+u", "apply_usage", "Apply usage", priority=True),
        Binding("ctrl+o", "toggle_ranking_mode", "Order", priority=True),
    ]

    def __init__(self, manager: QuickSheet, initial_query: str = "") -> None:
        """
        Initialize the app.

        Args:
            manager: QuickSheet session to search and copy through
            initial_query: Text placed in the search box on start
        """
        super().__init__()
        self.manager = manager
        self.state = AppState()
        self.state.search.query = initial_query

    def compose(self) -> ComposeResult:
        """Compose the app layout."""
        yield Header()
        with Horizontal(id="search-row"):
            yield Input(
                value=self.state.search.query,
                placeholder="Search constants and equations",
                id="search-input",
            )
        with Horizontal():
            yield OptionList(id="category-list")
            with VerticalScroll(id="results-scroll"):
                yield Static(id="results")
        yield Static(id="status")
        yield Footer()

    def on_mount(self) -> None:
        self._load_categories()
        self.refresh_results()
        self.query_one("#search-input", Input).focus()

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def _load_categories(self) -> None:
        options = self.manager.categories()
        self.state.search.category_options = options
        if self.state.search.category not in options:
            self.state.search.category = None

        option_list = self.query_one("#category-list", OptionList)
        option_list.clear_options()
        option_list.add_options([Option(option_label(value)) for value in options])
        option_list.highlighted = options.index(self.state.search.category)

    def refresh_results(self) -> None:
        """Re-run the ranking pass for the current query and category."""
        search = self.state.search
        search.result = self.manager.search(search.query, search.category)
        self.query_one("#results", Static).update(
            render_result(search.result, self.state.max_rows)
        )
        self._update_status()

    def _update_status(self) -> None:
        ranking = self.manager.prefs.ranking
        parts = [
            f"{self.state.search.result.total if self.state.search.result else 0} result(s)",
            f"order: {ranking.ranking_mode.value}",
            f"instant re-rank: {'on' if ranking.instant_rerank_on_copy else 'off'}",
        ]
        last = self.state.last_copy
        if last.item_id:
            parts.append(f"copied {last.item_id} ({last.uses} uses)")
        self.query_one("#status", Static).update(" | ".join(parts))

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id != "search-input":
            return
        self.state.search.query = event.value
        self.refresh_results()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "search-input":
            return
        self.copy_top()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        options = self.state.search.category_options
        if 0 <= event.option_index < len(options):
            self.state.search.category = options[event.option_index]
            self.refresh_results()
            self.query_one("#search-input", Input).focus()

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def copy_top(self) -> Optional[str]:
        """Copy the first shown item to the clipboard and record the use."""
        result = self.state.search.result
        top = result.top if result else None
        if top is None:
            self.notify("Nothing to copy", severity="warning")
            return None

        try:
            copied = self.manager.copy(top.id)
        except ValueError as e:
            self.notify(f"Error: {e}", severity="error")
            return None

        self.copy_to_clipboard(copied.text)
        last = self.state.last_copy
        last.item_id, last.text, last.uses = copied.item_id, copied.text, copied.uses
        self.notify(f"Copied {top.name}")
        # Frozen snapshot keeps the order stable unless instant re-rank is on
        self.refresh_results()
        return copied.text

    def action_clear_query(self) -> None:
        self.query_one("#search-input", Input).value = ""

    def action_toggle_instant_rerank(self) -> None:
        enabled = not self.manager.prefs.ranking.instant_rerank_on_copy
        self.manager.set_instant_rerank(enabled)
        self.notify(f"Instant re-rank {'on' if enabled else 'off'}")
        self.refresh_results()

    def action_apply_usage(self) -> None:
        self.manager.apply_usage_now()
        self.notify("Usage applied")
        self.refresh_results()

    def action_toggle_ranking_mode(self) -> None:
        current = self.manager.prefs.ranking.ranking_mode
        new_mode = (
            RankingMode.POPULARITY_FIRST
            if current == RankingMode.EXPLICIT_ORDER
            else RankingMode.EXPLICIT_ORDER
        )
        self.manager.set_ranking_mode(new_mode)
        self.notify(f"Order: {new_mode.value}")
        self.refresh_results()
