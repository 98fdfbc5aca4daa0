"""
Point-of-sale cart helper: local product catalog, cart consolidation,
member directory login and discount totals.
"""
from .session import PosSession

__all__ = ["PosSession"]
