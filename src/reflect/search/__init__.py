"""Tag matching and debounced incremental filtering."""

from .controller import FilterController
from .debounce import DebounceScheduler
from .matching import filter_records, matches

__all__ = ["FilterController", "DebounceScheduler", "filter_records", "matches"]
