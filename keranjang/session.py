"""
Session glue - one object per open register.

Usage:
    session = PosSession()
    prefill = await session.prepare_scan(barcode)
    session.add_item(name, price, barcode=barcode)
    member = await session.login("budi", "1234")
    session.totals()
"""
import logging
from datetime import datetime
from typing import Awaitable, Callable, Dict, List, Optional

from .cart import CartConsolidator, PriceHistory
from .catalog import CatalogStore, MatchEngine
from .errors import ValidationError
from .integrations.member_feed import fetch_member_feed
from .integrations.product_api import fetch_product_name
from .member_parser import parse_member_directory
from .members import MemberMatcher, MemberSession, validate_login_query
from .models import CartLine, ItemCandidate, Member, ProductSuggestion, ScanPrefill, Totals
from .pricing import resolve_totals
from .storage import KeyValueStore, get_store
from .utils import now_local

logger = logging.getLogger(__name__)

FeedFetcher = Callable[[], Awaitable[Optional[str]]]
NameFetcher = Callable[[str], Awaitable[Optional[str]]]


class RequestTracker:
    """
    Latest-request-wins bookkeeping per request kind. A response is applied
    only if no newer request of the same kind was started while it was in
    flight.
    """

    def __init__(self):
        self._latest: Dict[str, int] = {}

    def begin(self, kind: str) -> int:
        token = self._latest.get(kind, 0) + 1
        self._latest[kind] = token
        return token

    def is_current(self, kind: str, token: int) -> bool:
        return self._latest.get(kind) == token


class PosSession:
    """Cart, catalog and member state for one register session."""

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        feed_fetcher: FeedFetcher = fetch_member_feed,
        name_fetcher: NameFetcher = fetch_product_name,
        clock: Callable[[], datetime] = now_local,
    ):
        store = store if store is not None else get_store()
        self.catalog = CatalogStore(store)
        self.match_engine = MatchEngine(self.catalog)
        self.price_history = PriceHistory(store)
        self.cart = CartConsolidator(self.catalog, self.price_history, store, clock=clock)
        self.member_session = MemberSession(store)
        self.member: Optional[Member] = self.member_session.load()
        self.feed_fetcher = feed_fetcher
        self.name_fetcher = name_fetcher
        self.requests = RequestTracker()

    # ---------------- catalog ----------------

    def suggest(self, query: str) -> List[ProductSuggestion]:
        return self.match_engine.search(query)

    def list_products(self, term: str = "") -> List[ProductSuggestion]:
        return self.catalog.filter_all(term)

    # ---------------- cart ----------------

    async def prepare_scan(self, barcode: str) -> Optional[ScanPrefill]:
        """
        Build the entry form pre-fill for a scanned barcode: last known price
        from history, product name from the public database.
        Returns None if a newer scan superseded this one.
        """
        barcode = (barcode or "").strip()
        if not barcode:
            raise ValidationError("Barcode is required")

        token = self.requests.begin("barcode")
        price = self.price_history.get_price(barcode)
        name = await self.name_fetcher(barcode)

        if not self.requests.is_current("barcode", token):
            logger.info(f"Discarding stale product lookup for {barcode}")
            return None
        return ScanPrefill(barcode=barcode, name=name, price=price)

    def add_item(self, name: str, price: int, barcode: Optional[str] = None) -> CartLine:
        return self.cart.add_or_increment(ItemCandidate(barcode=barcode, name=name, price=price))

    def update_quantity(self, line_id: str, delta: int) -> Optional[CartLine]:
        return self.cart.update_quantity(line_id, delta)

    def remove_item(self, line_id: str) -> None:
        self.cart.remove(line_id)

    def clear_cart(self) -> None:
        self.cart.clear()

    # ---------------- member ----------------

    async def login(self, name_query: str, phone_tail: str) -> Optional[Member]:
        """
        Fetch the directory and log in the first matching member.
        Returns None when not found, unreachable, or superseded by a newer login.
        """
        name_query, phone_tail = validate_login_query(name_query, phone_tail)

        token = self.requests.begin("member")
        feed = await self.feed_fetcher()
        if not self.requests.is_current("member", token):
            logger.info("Discarding stale member directory response")
            return None
        if feed is None:
            return None

        member = MemberMatcher(parse_member_directory(feed)).find_by_query(name_query, phone_tail)
        if member is None:
            logger.info(f"No member matches {name_query!r} / ...{phone_tail}")
            return None

        self.member = member
        self.member_session.save(member)
        logger.info(f"Member logged in: {member.name} ({member.level}, {member.discount_percentage}%)")
        return member

    def logout(self) -> None:
        self.member = None
        self.member_session.clear()
        # late login responses must not resurrect the session
        self.requests.begin("member")

    # ---------------- totals ----------------

    def totals(self) -> Totals:
        return resolve_totals(self.cart.lines(), self.member)
