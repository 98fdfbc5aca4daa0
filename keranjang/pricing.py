from typing import Iterable, Optional

from .models import CartLine, Member, Totals


def calculate_subtotal(lines: Iterable[CartLine]) -> int:
    return sum(line.price * line.quantity for line in lines)


def calculate_discount(subtotal: int, member: Optional[Member]) -> float:
    """Member discount on the whole subtotal; 0 without a member."""
    if member is None:
        return 0.0
    return subtotal * member.discount_percentage / 100


def resolve_totals(lines: Iterable[CartLine], member: Optional[Member] = None) -> Totals:
    """
    Derive subtotal, discount and total for the current cart.
    Nothing here is stored; call again after every cart or member change.
    """
    lines = list(lines)
    subtotal = calculate_subtotal(lines)
    discount = calculate_discount(subtotal, member)
    return Totals(
        subtotal=subtotal,
        discount=discount,
        total=subtotal - discount,
        total_items=sum(line.quantity for line in lines),
    )
