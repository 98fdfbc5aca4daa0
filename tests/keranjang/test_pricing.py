"""
Tests for subtotal / discount / total derivation.
"""
from datetime import datetime, timezone

import pytest

from keranjang.models import CartLine, Member
from keranjang.pricing import resolve_totals

ADDED = datetime(2026, 1, 5, tzinfo=timezone.utc)


def line(line_id: str, price: int, quantity: int = 1) -> CartLine:
    return CartLine(id=line_id, name=line_id, price=price, quantity=quantity, added_at=ADDED)


class TestTotals:

    def test_member_discount(self):
        member = Member(name="Budi", phone="0812", discount_percentage=10)
        totals = resolve_totals([line("a", 25000, 2), line("b", 50000)], member)

        assert totals.subtotal == 100000
        assert totals.discount == pytest.approx(10000)
        assert totals.total == pytest.approx(90000)
        assert totals.total_items == 3

    def test_no_member_no_discount(self):
        totals = resolve_totals([line("a", 3500, 4)])
        assert totals.subtotal == 14000
        assert totals.discount == 0
        assert totals.total == 14000

    def test_empty_cart(self):
        member = Member(name="Budi", phone="0812", discount_percentage=50)
        totals = resolve_totals([], member)
        assert totals.subtotal == 0
        assert totals.total == 0
        assert totals.total_items == 0

    def test_fractional_percentage(self):
        member = Member(name="Budi", phone="0812", discount_percentage=2.5)
        totals = resolve_totals([line("a", 10000)], member)
        assert totals.discount == pytest.approx(250)
        assert totals.total == pytest.approx(9750)
