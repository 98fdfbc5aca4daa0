"""
Pydantic v2 models for catalog, cart and member data.
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class ProductSuggestion(BaseModel):
    """Known product offered for autocomplete."""
    name: str
    price: int = Field(ge=0)
    source: Literal["history", "database"]


class ItemCandidate(BaseModel):
    """Item the user wants to put in the cart (scanned or typed)."""
    barcode: Optional[str] = None
    name: str
    price: int


class CartLine(BaseModel):
    """Single cart row."""
    id: str
    barcode: Optional[str] = None
    name: str
    price: int = Field(ge=0)
    quantity: int = Field(default=1, ge=1)
    added_at: datetime


class Member(BaseModel):
    """Member resolved from the directory feed; lives for one session."""
    name: str
    phone: str  # digits only
    level: str = "Member"
    discount_percentage: float = Field(default=0.0, ge=0.0, le=100.0)


class Totals(BaseModel):
    """Derived cart amounts, recomputed on every change."""
    subtotal: int
    discount: float
    total: float
    total_items: int


class ScanPrefill(BaseModel):
    """Values used to pre-fill the entry form after a barcode scan."""
    barcode: str
    name: Optional[str] = None
    price: Optional[int] = None


class CatalogProduct(BaseModel):
    """External catalog search hit, for manual cross-reference only."""
    name: str
    brand: str = ""
    barcode: str
