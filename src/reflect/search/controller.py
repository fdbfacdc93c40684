"""Incremental search state for a list view.

A FilterController holds what the user typed and what the list should show.
The typed term is echoed back immediately while the (potentially long)
filter pass waits for typing to pause:

    controller = FilterController(records, delay_ms=1000, on_change=render)
    controller.on_search_term_change("def")   # search_term updated now
    controller.on_search_term_change("defin") # previous pass dropped
    # ~1s later: render(filtered) with records matching "defin"

An empty term bypasses the delay and restores the full record set at once.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Any

from ..config import DEFAULT_FILTER_DELAY_MS
from .debounce import DebounceScheduler
from .matching import filter_records

logger = logging.getLogger(__name__)


class FilterController:
    """Own the current search term and the filtered view over a record set."""

    def __init__(
        self,
        records: Sequence[Any],
        delay_ms: int = DEFAULT_FILTER_DELAY_MS,
        *,
        case_sensitive: bool = True,
        on_change: Callable[[list[Any]], None] | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        """Initialize the controller.

        Args:
            records: Full record set. Read, never modified.
            delay_ms: Quiet period before a non-empty term is applied.
            case_sensitive: Passed through to the match predicate.
            on_change: Called with the new filtered list each time one is published.
            loop: Event loop for the debounce timer. Uses the running loop if None.
        """
        self._records = records
        self._case_sensitive = case_sensitive
        self._on_change = on_change
        self._scheduler = DebounceScheduler(delay_ms=delay_ms, loop=loop)
        self._search_term = ""
        self._filtered: list[Any] = list(records)
        self._disposed = False

    @property
    def search_term(self) -> str:
        return self._search_term

    @property
    def filtered(self) -> list[Any]:
        """Records currently shown. May lag behind `search_term` while a pass is pending."""
        return list(self._filtered)

    @property
    def records(self) -> Sequence[Any]:
        return self._records

    @property
    def delay_ms(self) -> int:
        return self._scheduler.delay_ms

    @property
    def pending(self) -> bool:
        return self._scheduler.pending

    @property
    def disposed(self) -> bool:
        return self._disposed

    def on_search_term_change(self, new_term: str) -> None:
        """Record a new search term and schedule (or skip) the filter pass.

        A non-empty term needs an event loop for its timer: either the loop
        passed to the constructor or a running one. Without it this raises
        RuntimeError and the controller keeps its previous term and pass.
        """
        if self._disposed:
            self._search_term = new_term
            logger.debug("Ignoring search term change on disposed controller")
            return

        if new_term == "":
            self._search_term = new_term
            self._scheduler.cancel()
            self._publish(list(self._records))
            return

        # The pass reads self._search_term when it fires, not new_term
        self._scheduler.schedule(self._apply_current_term)
        self._search_term = new_term

    def reset(self) -> None:
        """Clear the search and show every record again."""
        self.on_search_term_change("")

    def flush(self) -> bool:
        """Apply a pending filter pass immediately.

        Returns:
            True if a pass was pending.
        """
        return self._scheduler.flush()

    def dispose(self) -> None:
        """Cancel any pending pass. The controller will not publish again."""
        self._scheduler.cancel()
        self._disposed = True

    def _apply_current_term(self) -> None:
        if self._disposed:
            return
        term = self._search_term
        result = filter_records(term, self._records, case_sensitive=self._case_sensitive)
        logger.debug("Filter %r matched %d of %d records", term, len(result), len(self._records))
        self._publish(result)

    def _publish(self, result: list[Any]) -> None:
        self._filtered = result
        if self._on_change is not None:
            self._on_change(list(result))

    def __enter__(self) -> "FilterController":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()
