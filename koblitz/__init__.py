"""Arithmetic for the secp256k1 curve, its base field and its scalar field."""

__version__ = "0.1.0"
__all__ = ["arith", "serde", "field", "scalar", "curve"]