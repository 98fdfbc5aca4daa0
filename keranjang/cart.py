"""
Cart consolidation: decides whether an added item bumps an existing line or
starts a new one, and keeps the cart and price history persisted.
"""
import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from .catalog import CatalogStore
from .errors import ValidationError
from .models import CartLine, ItemCandidate
from .storage import CART_KEY, PRICE_HISTORY_KEY, KeyValueStore, get_store, load_json, save_json
from .utils import digits_only, epoch_millis, now_local

logger = logging.getLogger(__name__)


def parse_price_input(text: str) -> int:
    """
    Parse a price typed into the entry form ("Rp 12.500" -> 12500).
    Every non-digit is dropped; nothing left is a validation error.
    """
    digits = digits_only(text)
    if not digits:
        raise ValidationError(f"Price {text!r} has no digits")
    return int(digits)


class PriceHistory:
    """Last price seen per barcode, used only to pre-fill the next scan."""

    def __init__(self, store: Optional[KeyValueStore] = None):
        self.store = store if store is not None else get_store()

    def load(self) -> Dict[str, int]:
        data = load_json(self.store, PRICE_HISTORY_KEY, {})
        if not isinstance(data, dict):
            return {}
        return {
            str(barcode): price for barcode, price in data.items()
            if isinstance(price, int) and not isinstance(price, bool)
        }

    def save_price(self, barcode: str, price: int) -> None:
        history = self.load()
        history[barcode] = price
        save_json(self.store, PRICE_HISTORY_KEY, history)

    def get_price(self, barcode: str) -> Optional[int]:
        """Saved price for pre-fill; a stored 0 counts as no price."""
        return self.load().get(barcode) or None


class CartConsolidator:
    """Owns cart lines and their merge policy."""

    def __init__(
        self,
        catalog: CatalogStore,
        price_history: PriceHistory,
        store: Optional[KeyValueStore] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self.catalog = catalog
        self.price_history = price_history
        self.store = store if store is not None else get_store()
        self.clock = clock
        self._lines: List[CartLine] = self._load()

    # ---------------- persistence ----------------

    def _load(self) -> List[CartLine]:
        data = load_json(self.store, CART_KEY, [])
        if not isinstance(data, list):
            logger.warning("Stored cart is not a list, starting empty")
            return []
        try:
            return [CartLine.model_validate(raw) for raw in data]
        except PydanticValidationError as e:
            logger.warning(f"Stored cart is corrupt, starting empty: {e}")
            return []

    def _save(self) -> None:
        save_json(self.store, CART_KEY, [line.model_dump(mode="json") for line in self._lines])

    # ---------------- queries ----------------

    def lines(self) -> List[CartLine]:
        return list(self._lines)

    def get(self, line_id: str) -> Optional[CartLine]:
        return next((line for line in self._lines if line.id == line_id), None)

    def _find_match(self, candidate: ItemCandidate) -> Optional[CartLine]:
        if candidate.barcode:
            return next((line for line in self._lines if line.barcode == candidate.barcode), None)
        name = candidate.name.casefold()
        return next(
            (line for line in self._lines
             if line.name.casefold() == name and line.price == candidate.price),
            None,
        )

    def _new_id(self, moment: datetime) -> str:
        token = epoch_millis(moment)
        taken = {line.id for line in self._lines}
        while str(token) in taken:
            token += 1
        return str(token)

    # ---------------- mutations ----------------

    def add_or_increment(self, candidate: ItemCandidate) -> CartLine:
        """Merge `candidate` into a matching line or prepend a new one."""
        name = candidate.name.strip()
        barcode = (candidate.barcode or "").strip() or None
        if not name:
            raise ValidationError("Item name is required")
        if candidate.price < 0:
            raise ValidationError(f"Price must not be negative, got {candidate.price}")
        candidate = candidate.model_copy(update={"name": name, "barcode": barcode})

        line = self._find_match(candidate)
        if line is not None:
            line.quantity += 1
            logger.debug(f"Merged {name!r} into line {line.id} (qty={line.quantity})")
        else:
            moment = self.clock()
            line = CartLine(
                id=barcode or self._new_id(moment),
                barcode=barcode,
                name=name,
                price=candidate.price,
                quantity=1,
                added_at=moment,
            )
            self._lines.insert(0, line)
            logger.info(f"Added new line {line.id}: {name} @ {candidate.price}")

        self._save()
        self.catalog.upsert(name, candidate.price)
        if barcode:
            self.price_history.save_price(barcode, candidate.price)
        return line

    def update_quantity(self, line_id: str, delta: int) -> Optional[CartLine]:
        """Shift quantity by `delta`, never below 1."""
        line = self.get(line_id)
        if line is None:
            return None
        line.quantity = max(1, line.quantity + delta)
        self._save()
        return line

    def remove(self, line_id: str) -> None:
        remaining = [line for line in self._lines if line.id != line_id]
        if len(remaining) != len(self._lines):
            self._lines = remaining
            self._save()

    def clear(self) -> None:
        self._lines = []
        self._save()
        logger.info("Cart cleared")
