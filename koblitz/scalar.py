"""The scalar field of the secp256k1 curve."""

from __future__ import annotations

from .field import FieldElement


class Fq(FieldElement):
    """The scalar field of secp256k1, of prime order
    ``0xfffffffffffffffffffffffffffffffebaaedce6af48a03bbfd25e8cd0364141``.

    Its multiplicative group has a 2-adic part of order ``2**6``, so square
    roots are taken by Tonelli-Shanks.
    """

    __slots__ = ()

    MODULUS = "0xfffffffffffffffffffffffffffffffebaaedce6af48a03bbfd25e8cd0364141"
    NUM_BITS = 256
    CAPACITY = 255
    S = 6
    MULTIPLICATIVE_GENERATOR = 7
    ROOT_OF_UNITY = 0x0C1DC060E7A91986_DF9879A3FBC483A8_98BDEAB680756045_992F4B5402B052F2
    ROOT_OF_UNITY_INV = 0xFD3AE181F12D7096_EFC7B0C75B8CBB72_77A275910AA413C3_B6FB30A0884F0D1C
    TWO_INV = 0x7FFFFFFFFFFFFFFF_FFFFFFFFFFFFFFFF_5D576E7357A4501D_DFE92F46681B20A1
    ZETA = 0x5363AD4CC05C30E0_A5261C028812645A_122E22EA20816678_DF02967C1B23BD72
    # GENERATOR ** (2 ** S)
    DELTA = 7**64

    def sqrt(self) -> Fq:
        """A square root by Tonelli-Shanks; raises ``ValueError`` for a non-residue."""
        return super().sqrt()