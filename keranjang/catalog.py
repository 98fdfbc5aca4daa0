"""
Local product catalog: user history (most-recently-used first) merged with the
seed catalog, plus the autocomplete search over both.
"""
import logging
from typing import Iterable, List, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from .models import ProductSuggestion
from .seed import SEED_CATALOG
from .storage import PRODUCT_HISTORY_KEY, KeyValueStore, get_store, load_json, save_json
from .utils import normalize_name

logger = logging.getLogger(__name__)

HISTORY_CAPACITY = 200
MIN_QUERY_LENGTH = 2
MAX_SUGGESTIONS = 5


def merge_unique(*tiers: Iterable[ProductSuggestion]) -> List[ProductSuggestion]:
    """
    Concatenate tiers in precedence order, keeping the first entry seen for
    each normalized name.
    """
    seen = set()
    merged = []
    for tier in tiers:
        for item in tier:
            key = normalize_name(item.name)
            if key in seen:
                continue
            seen.add(key)
            merged.append(item)
    return merged


class CatalogStore:
    """Owns the product history; every read and write of it goes through here."""

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        seed: Sequence[ProductSuggestion] = SEED_CATALOG,
        capacity: int = HISTORY_CAPACITY,
    ):
        self.store = store if store is not None else get_store()
        self.seed = tuple(seed)
        self.capacity = capacity

    def history(self) -> List[ProductSuggestion]:
        """Persisted history, MRU first. Corrupt data reads as empty."""
        data = load_json(self.store, PRODUCT_HISTORY_KEY, [])
        if not isinstance(data, list):
            logger.warning("Product history is not a list, ignoring it")
            return []

        items = []
        for raw in data:
            try:
                items.append(ProductSuggestion.model_validate({**raw, "source": "history"}))
            except (PydanticValidationError, TypeError) as e:
                logger.debug(f"Skipping malformed history entry {raw!r}: {e}")
        return items

    def _save_history(self, items: List[ProductSuggestion]) -> None:
        save_json(self.store, PRODUCT_HISTORY_KEY, [
            {"name": item.name, "price": item.price} for item in items
        ])

    def upsert(self, name: str, price: int) -> None:
        """Record `name` at `price` as the most recently used product."""
        display = (name or "").strip()
        key = normalize_name(display)
        if not key:
            logger.debug("Ignoring upsert with blank product name")
            return
        if isinstance(price, bool) or not isinstance(price, int) or price < 0:
            logger.warning(f"Ignoring upsert of {display!r} with invalid price {price!r}")
            return

        items = self.history()
        existing = next((item for item in items if normalize_name(item.name) == key), None)
        if existing is not None:
            items.remove(existing)
            entry = existing.model_copy(update={"price": price})
        else:
            entry = ProductSuggestion(name=display, price=price, source="history")

        items.insert(0, entry)
        if len(items) > self.capacity:
            logger.debug(f"History over capacity, dropping {len(items) - self.capacity} oldest")
            del items[self.capacity:]
        self._save_history(items)

    def get_all(self) -> List[ProductSuggestion]:
        """History and seed merged (history wins), sorted by display name."""
        merged = merge_unique(self.history(), self.seed)
        return sorted(merged, key=lambda item: (item.name.casefold(), item.name))

    def filter_all(self, term: str) -> List[ProductSuggestion]:
        """Full product listing narrowed by a case-insensitive substring."""
        everything = self.get_all()
        needle = (term or "").strip().casefold()
        if not needle:
            return everything
        return [item for item in everything if needle in item.name.casefold()]


class MatchEngine:
    """Autocomplete search. Reads the catalog, never writes it."""

    def __init__(self, catalog: CatalogStore):
        self.catalog = catalog

    def search(self, query: str) -> List[ProductSuggestion]:
        needle = (query or "").strip().casefold()
        if len(needle) < MIN_QUERY_LENGTH:
            return []

        results: List[ProductSuggestion] = []
        seen = set()
        # history first so it shadows seed entries with the same name
        for item in [*self.catalog.history(), *self.catalog.seed]:
            if needle not in item.name.casefold():
                continue
            key = normalize_name(item.name)
            if key in seen:
                continue
            seen.add(key)
            results.append(item)
            if len(results) >= MAX_SUGGESTIONS:
                break
        return results
