"""
Custom errors for the cart helper.
Used by the parser, the integrations and the session glue.
"""


class KeranjangError(Exception):
    """Generic cart helper error."""
    pass


# ---------------- Input ----------------

class ValidationError(KeranjangError):
    """Locally detectable bad input (short query, bad phone tail, empty barcode)."""
    pass


class ParseError(KeranjangError):
    """A member feed row is missing a required value."""
    pass


# ---------------- Integrations ----------------

class TransientNetworkError(KeranjangError):
    """Timeout, non-2xx response or connection failure."""
    pass


class StorageError(KeranjangError):
    """Key-value backend read or write failed."""
    pass
