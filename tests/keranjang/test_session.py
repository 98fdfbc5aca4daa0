"""
End-to-end session tests: scan prefill, cart, login, totals and stale
responses.
"""
import asyncio

import pytest

from keranjang.errors import ValidationError
from keranjang.session import PosSession, RequestTracker

FEED = (
    "Nama Member,Nomor WA,Level,Diskon\n"
    "Budi Santoso,0812-3456-1234,Gold,10%\n"
    "\"Siti, Aminah\",0857 1111 5678,Silver,0.05\n"
)


def make_fetchers(feed=FEED, names=None):
    calls = {"feed": 0, "names": []}

    async def feed_fetcher():
        calls["feed"] += 1
        return feed

    async def name_fetcher(barcode):
        calls["names"].append(barcode)
        return (names or {}).get(barcode)

    return feed_fetcher, name_fetcher, calls


@pytest.fixture
def session(kv, clock):
    feed_fetcher, name_fetcher, _ = make_fetchers(names={"899123": "Aqua 600ml"})
    return PosSession(kv, feed_fetcher=feed_fetcher, name_fetcher=name_fetcher, clock=clock)


class TestScanFlow:

    def test_prefill_uses_price_history(self, session):
        prefill = asyncio.run(session.prepare_scan("899123"))
        assert prefill.name == "Aqua 600ml"
        assert prefill.price is None

        session.add_item(prefill.name, 4000, barcode=prefill.barcode)
        again = asyncio.run(session.prepare_scan("899123"))
        assert again.price == 4000

    def test_unknown_barcode(self, session):
        prefill = asyncio.run(session.prepare_scan("000111"))
        assert prefill.name is None
        assert prefill.price is None

    def test_blank_barcode(self, session):
        with pytest.raises(ValidationError):
            asyncio.run(session.prepare_scan(""))

    def test_added_items_feed_suggestions(self, session):
        session.add_item("Kerupuk Udang", 12000)
        session.add_item("Kerupuk Kulit", 9000)

        names = [s.name for s in session.suggest("kerupuk")]
        assert names == ["Kerupuk Kulit", "Kerupuk Udang"]
        assert "Kerupuk Udang" in [p.name for p in session.list_products("udang")]


class TestLogin:

    def test_login_applies_discount(self, session):
        session.add_item("Beras 5kg", 75000)
        session.add_item("Minyak 2L", 25000)

        member = asyncio.run(session.login("budi", "1234"))

        assert member.name == "Budi Santoso"
        assert member.phone == "081234561234"
        totals = session.totals()
        assert totals.subtotal == 100000
        assert totals.total == pytest.approx(90000)

    def test_fraction_discount_and_quoted_name(self, session):
        member = asyncio.run(session.login("aminah", "5678"))
        assert member.name == "Siti, Aminah"
        assert member.discount_percentage == pytest.approx(5)

    def test_not_found_keeps_no_member(self, session):
        assert asyncio.run(session.login("Joko", "9999")) is None
        assert session.member is None

    def test_validation_before_fetch(self, kv):
        feed_fetcher, name_fetcher, calls = make_fetchers()
        session = PosSession(kv, feed_fetcher=feed_fetcher, name_fetcher=name_fetcher)

        with pytest.raises(ValidationError):
            asyncio.run(session.login("Bu", "1234"))
        assert calls["feed"] == 0

    def test_unreachable_feed(self, kv):
        async def offline():
            return None

        session = PosSession(kv, feed_fetcher=offline)
        assert asyncio.run(session.login("Budi", "1234")) is None

    def test_member_survives_restart_until_logout(self, kv, session):
        asyncio.run(session.login("budi", "1234"))

        restarted = PosSession(kv)
        assert restarted.member.name == "Budi Santoso"

        restarted.logout()
        assert restarted.member is None
        assert PosSession(kv).member is None
        assert restarted.totals().discount == 0


class TestStaleResponses:

    def test_tracker(self):
        tracker = RequestTracker()
        first = tracker.begin("member")
        second = tracker.begin("member")
        other = tracker.begin("barcode")

        assert not tracker.is_current("member", first)
        assert tracker.is_current("member", second)
        assert tracker.is_current("barcode", other)

    def test_late_login_does_not_overwrite_newer(self, kv):
        slow_feed = "Nama,HP,Diskon\nBudi Santoso,0812-1234,10%\nSiti Aminah,0857-5678,5%\n"
        release = {}

        async def feed_fetcher():
            # first call waits until the second has finished
            if "first" not in release:
                release["first"] = asyncio.Event()
                await release["first"].wait()
            return slow_feed

        session = PosSession(kv, feed_fetcher=feed_fetcher)

        async def scenario():
            first = asyncio.create_task(session.login("Budi", "1234"))
            await asyncio.sleep(0)
            second = await session.login("Siti", "5678")
            release["first"].set()
            return await first, second

        stale, fresh = asyncio.run(scenario())

        assert stale is None
        assert fresh.name == "Siti Aminah"
        assert session.member.name == "Siti Aminah"

    def test_logout_discards_inflight_login(self, kv):
        gate = {}

        async def feed_fetcher():
            gate["event"] = asyncio.Event()
            await gate["event"].wait()
            return FEED

        session = PosSession(kv, feed_fetcher=feed_fetcher)

        async def scenario():
            task = asyncio.create_task(session.login("Budi", "1234"))
            await asyncio.sleep(0)
            session.logout()
            gate["event"].set()
            return await task

        assert asyncio.run(scenario()) is None
        assert session.member is None

    def test_late_scan_discarded(self, kv):
        gate = {}

        async def name_fetcher(barcode):
            if barcode == "111":
                gate["event"] = asyncio.Event()
                await gate["event"].wait()
            return f"Product {barcode}"

        session = PosSession(kv, name_fetcher=name_fetcher)

        async def scenario():
            first = asyncio.create_task(session.prepare_scan("111"))
            await asyncio.sleep(0)
            second = await session.prepare_scan("222")
            gate["event"].set()
            return await first, second

        stale, fresh = asyncio.run(scenario())
        assert stale is None
        assert fresh.name == "Product 222"
