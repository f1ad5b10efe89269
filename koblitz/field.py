"""Prime field elements, and the base field of the secp256k1 curve."""

from __future__ import annotations

import secrets
from collections.abc import Iterable
from typing import Any, ClassVar, TypeVar, Union

from .serde import SerdeObject

_U64 = (1 << 64) - 1
_BYTES = 32
_ELEMENT_CONSTANTS = (
    "MULTIPLICATIVE_GENERATOR",
    "TWO_INV",
    "ROOT_OF_UNITY",
    "ROOT_OF_UNITY_INV",
    "DELTA",
    "ZETA",
)

F = TypeVar("F", bound="FieldElement")
Exponent = Union[int, Iterable[int]]


def _check_limb(limb: int) -> int:
    if isinstance(limb, bool) or not isinstance(limb, int) or not 0 <= limb <= _U64:
        raise ValueError(f"limb out of 64-bit range: {limb!r}")
    return limb


def _limbs_to_int(limbs: Iterable[int], count: int) -> int:
    limbs = list(limbs)
    if len(limbs) != count:
        raise ValueError(f"expected {count} limbs, got {len(limbs)}")
    return sum(_check_limb(limb) << (64 * i) for i, limb in enumerate(limbs))


def _exponent(exp: Exponent) -> int:
    """Accept an exponent as a non-negative int or as little-endian 64-bit limbs."""
    if isinstance(exp, int) and not isinstance(exp, bool):
        if exp < 0:
            raise ValueError("exponent must be non-negative")
        return exp
    return sum(_check_limb(limb) << (64 * i) for i, limb in enumerate(exp))


def _fixed_bytes(data: bytes, length: int) -> bytes:
    data = bytes(data)
    if len(data) != length:
        raise ValueError(f"expected {length} bytes, got {len(data)}")
    return data


class FieldElement(SerdeObject):
    """An element of a prime field of at most 256 bits.

    Subclasses set ``MODULUS`` (a hex string) and the field constants; the
    constants may be given as canonical integers and are turned into elements.
    Raw bytes hold the Montgomery form ``a * 2**256 mod p``, little-endian.
    """

    __slots__ = ("_value",)

    MODULUS: ClassVar[str]
    NUM_BITS: ClassVar[int] = 256
    CAPACITY: ClassVar[int] = 255
    S: ClassVar[int]
    ZERO: ClassVar[Any]
    ONE: ClassVar[Any]
    MULTIPLICATIVE_GENERATOR: ClassVar[Any]
    TWO_INV: ClassVar[Any]
    ROOT_OF_UNITY: ClassVar[Any]
    ROOT_OF_UNITY_INV: ClassVar[Any]
    DELTA: ClassVar[Any]
    ZETA: ClassVar[Any]

    _p: ClassVar[int]
    _r: ClassVar[int]
    _r_inv: ClassVar[int]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        modulus = cls.__dict__.get("MODULUS")
        if modulus is None:
            return
        p = int(modulus, 16)
        cls._p = p
        cls._r = (1 << 256) % p
        cls._r_inv = pow(cls._r, -1, p)
        cls.ZERO = cls(0)
        cls.ONE = cls(1)
        for name in _ELEMENT_CONSTANTS:
            value = cls.__dict__.get(name)
            if isinstance(value, int):
                setattr(cls, name, cls(value))

    def __init__(self, value: int = 0) -> None:
        p = getattr(type(self), "_p", None)
        if p is None:
            raise TypeError(f"{type(self).__name__} has no modulus")
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"expected an int, got {type(value).__name__}")
        self._value = value % p

    # Construction

    @classmethod
    def zero(cls: type[F]) -> F:
        return cls(0)

    @classmethod
    def one(cls: type[F]) -> F:
        return cls(1)

    @classmethod
    def random(cls: type[F], rng: Any = None) -> F:
        """Draw a uniform element by reducing 512 random bits."""
        bits = secrets.randbits(512) if rng is None else rng.getrandbits(512)
        return cls(bits)

    @classmethod
    def from_raw(cls: type[F], limbs: Iterable[int]) -> F:
        """Build from four little-endian 64-bit limbs, reducing modulo p."""
        return cls(_limbs_to_int(limbs, 4))

    @classmethod
    def from_u512(cls: type[F], limbs: Iterable[int]) -> F:
        """Build from eight little-endian 64-bit limbs, reducing modulo p."""
        return cls(_limbs_to_int(limbs, 8))

    @classmethod
    def from_u128(cls: type[F], value: int) -> F:
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < 1 << 128:
            raise ValueError(f"value out of 128-bit range: {value!r}")
        return cls(value)

    @classmethod
    def from_repr(cls: type[F], data: bytes) -> F:
        """Decode the canonical 32-byte little-endian encoding."""
        value = int.from_bytes(_fixed_bytes(data, _BYTES), "little")
        if value >= cls._p:
            raise ValueError("encoding is not less than the modulus")
        return cls(value)

    def to_repr(self) -> bytes:
        """The canonical 32-byte little-endian encoding."""
        return self._value.to_bytes(_BYTES, "little")

    @classmethod
    def from_uniform_bytes(cls: type[F], data: bytes) -> F:
        """Reduce a 512-bit little-endian integer modulo p."""
        return cls(int.from_bytes(_fixed_bytes(data, 64), "little"))

    # Predicates

    def is_zero(self) -> bool:
        return self._value == 0

    def is_odd(self) -> bool:
        return self._value & 1 == 1

    # Arithmetic

    def _coerce(self, other: object) -> int | None:
        if type(other) is type(self):
            return other._value  # type: ignore[attr-defined]
        if isinstance(other, int) and not isinstance(other, bool):
            return other % self._p
        return None

    def __add__(self: F, other: object) -> F:
        value = self._coerce(other)
        if value is None:
            return NotImplemented
        return type(self)(self._value + value)

    __radd__ = __add__

    def __sub__(self: F, other: object) -> F:
        value = self._coerce(other)
        if value is None:
            return NotImplemented
        return type(self)(self._value - value)

    def __rsub__(self: F, other: object) -> F:
        value = self._coerce(other)
        if value is None:
            return NotImplemented
        return type(self)(value - self._value)

    def __mul__(self: F, other: object) -> F:
        value = self._coerce(other)
        if value is None:
            return NotImplemented
        return type(self)(self._value * value)

    __rmul__ = __mul__

    def __neg__(self: F) -> F:
        return type(self)(-self._value)

    def __pow__(self: F, exp: int) -> F:
        return self.pow(exp)

    def double(self: F) -> F:
        return type(self)(self._value << 1)

    def square(self: F) -> F:
        return type(self)(self._value * self._value)

    def pow(self: F, exp: Exponent) -> F:
        """Raise to an exponent given as an int or little-endian 64-bit limbs."""
        return type(self)(pow(self._value, _exponent(exp), self._p))

    def pow_vartime(self: F, exp: Exponent) -> F:
        return self.pow(exp)

    def invert(self: F) -> F:
        """The multiplicative inverse; raises ``ZeroDivisionError`` for zero."""
        if self._value == 0:
            raise ZeroDivisionError("zero has no inverse")
        return type(self)(pow(self._value, self._p - 2, self._p))

    def sqrt(self: F) -> F:
        """A square root by Tonelli-Shanks; raises ``ValueError`` for a non-residue."""
        if self._value == 0:
            return self
        cls = type(self)
        t = (self._p - 1) >> cls.S
        w = self.pow((t - 1) // 2)
        x = self * w
        b = x * w
        z = cls.ROOT_OF_UNITY
        v = cls.S
        while b != cls.ONE:
            k = 0
            b2k = b
            while b2k != cls.ONE:
                b2k = b2k.square()
                k += 1
                if k == v:
                    raise ValueError("element is not a quadratic residue")
            w = z.pow(1 << (v - k - 1))
            z = w.square()
            b = b * z
            x = x * w
            v = k
        return x

    @classmethod
    def sqrt_ratio(cls: type[F], num: F, div: F) -> tuple[bool, F]:
        """Return ``(True, sqrt(num/div))`` when that exists, else
        ``(False, sqrt(ROOT_OF_UNITY * num/div))``; a zero divisor gives
        ``(num.is_zero(), 0)``."""
        if div.is_zero():
            return num.is_zero(), cls.ZERO
        ratio = num * div.invert()
        try:
            return True, ratio.sqrt()
        except ValueError:
            return False, (ratio * cls.ROOT_OF_UNITY).sqrt()

    # Serialization

    @classmethod
    def size(cls) -> int:
        return _BYTES

    @classmethod
    def _raw_length(cls) -> int:
        return cls.size()

    @classmethod
    def from_raw_bytes_unchecked(cls: type[F], data: bytes) -> F:
        montgomery = int.from_bytes(_fixed_bytes(data, _BYTES), "little")
        return cls(montgomery * cls._r_inv)

    @classmethod
    def from_raw_bytes(cls: type[F], data: bytes) -> F:
        montgomery = int.from_bytes(_fixed_bytes(data, _BYTES), "little")
        if montgomery >= cls._p:
            raise ValueError("raw encoding is not less than the modulus")
        return cls(montgomery * cls._r_inv)

    def to_raw_bytes(self) -> bytes:
        return (self._value * self._r % self._p).to_bytes(_BYTES, "little")

    # Python protocol

    def __int__(self) -> int:
        return self._value

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._value == other._value  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._value))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(0x{self._value:064x})"


class Fp(FieldElement):
    """The base field of secp256k1."""

    __slots__ = ()

    MODULUS = "0xfffffffffffffffffffffffffffffffffffffffffffffffffffffffefffffc2f"
    NUM_BITS = 256
    CAPACITY = 255
    S = 1
    MULTIPLICATIVE_GENERATOR = 3
    TWO_INV = 0x7FFFFFFFFFFFFFFF_FFFFFFFFFFFFFFFF_FFFFFFFFFFFFFFFF_FFFFFFFF7FFFFE18
    ROOT_OF_UNITY = 0xFFFFFFFFFFFFFFFF_FFFFFFFFFFFFFFFF_FFFFFFFFFFFFFFFF_FFFFFFFEFFFFFC2E
    ROOT_OF_UNITY_INV = 0xFFFFFFFFFFFFFFFF_FFFFFFFFFFFFFFFF_FFFFFFFFFFFFFFFF_FFFFFFFEFFFFFC2E
    DELTA = 9
    ZETA = 0x7AE96A2B657C0710_6E64479EAC3434E9_9CF0497512F58995_C1396C28719501EE

    def sqrt(self) -> Fp:
        """A square root via ``(p + 1) / 4``; raises ``ValueError`` for a non-residue."""
        root = self.pow((self._p + 1) // 4)
        if root.square() != self:
            raise ValueError("element is not a quadratic residue")
        return root