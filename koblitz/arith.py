"""Multi-precision helpers on 64-bit limbs: add with carry, subtract with borrow, multiply-accumulate."""

from __future__ import annotations

_MASK64 = (1 << 64) - 1
_MASK128 = (1 << 128) - 1


def adc(a: int, b: int, carry: int) -> tuple[int, int]:
    """Compute ``a + b + carry``, returning the low limb and the new carry."""
    total = a + b + carry
    return total & _MASK64, (total >> 64) & _MASK64


def sbb(a: int, b: int, borrow: int) -> tuple[int, int]:
    """Compute ``a - (b + borrow)``, returning the low limb and the new borrow.

    Only the top bit of the incoming borrow is used.  The outgoing borrow is
    ``0`` when no underflow occurred and ``2**64 - 1`` when it did.
    """
    difference = (a - (b + (borrow >> 63))) & _MASK128
    return difference & _MASK64, (difference >> 64) & _MASK64


def mac(a: int, b: int, c: int, carry: int) -> tuple[int, int]:
    """Compute ``a + b * c + carry``, returning the low limb and the new carry."""
    total = a + b * c + carry
    return total & _MASK64, (total >> 64) & _MASK64