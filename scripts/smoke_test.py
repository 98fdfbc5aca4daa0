#!/usr/bin/env python3
"""
Smoke test script for the cart helper.
Simulates a short register session and prints what the cashier would see.

Usage:
    python scripts/smoke_test.py
    MEMBER_FEED_URL=https://.../export?format=csv python scripts/smoke_test.py Budi 1234
"""
import asyncio
import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from keranjang.session import PosSession
from keranjang.settings import configure, settings
from keranjang.storage import InMemoryStore

logger = logging.getLogger(__name__)


def print_separator():
    print("\n" + "=" * 80 + "\n")


def print_cart(session: PosSession):
    for line in session.cart.lines():
        print(f"  {line.quantity:>3} x {line.name:<35} {line.price:>10}")
    totals = session.totals()
    print(f"  Subtotal: {totals.subtotal}")
    if session.member:
        print(f"  Member {session.member.name} ({session.member.discount_percentage}%): -{totals.discount:.0f}")
    print(f"  Total: {totals.total:.0f} ({totals.total_items} items)")


async def main(argv: list[str]):
    configure()
    session = PosSession(InMemoryStore())

    print_separator()
    print("Scan 8996001600146 twice, type two manual items")
    prefill = await session.prepare_scan("8996001600146")
    name = prefill.name or "Aqua 600ml"
    session.add_item(name, prefill.price or 4000, barcode=prefill.barcode)
    session.add_item(name, 4000, barcode=prefill.barcode)
    session.add_item("Teh Botol", 4500)
    session.add_item("teh botol", 5000)
    print_cart(session)

    print_separator()
    print("Suggestions for 'te':", [s.name for s in session.suggest("te")])

    if len(argv) == 2 and settings.MEMBER_FEED_URL:
        print_separator()
        member = await session.login(argv[0], argv[1])
        print("Login:", member.name if member else "not found")
        print_cart(session)


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:]))
