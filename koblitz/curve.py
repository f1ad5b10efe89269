"""The secp256k1 curve ``y^2 = x^3 + 7`` over :class:`Fp`, with scalars in :class:`Fq`.

Points are held in homogeneous projective coordinates ``(X : Y : Z)``, where
``x = X/Z`` and ``y = Y/Z``.  The identity is ``(0 : 1 : 0)``.  Addition and
doubling use complete formulas for short Weierstrass curves with ``a = 0``.
"""

from __future__ import annotations

import secrets
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, BinaryIO

from .field import Fp
from .scalar import Fq
from .serde import SerdeObject

__all__ = ["Secp256k1", "Secp256k1Affine", "CURVE_ID", "COMPRESSED_SIZE"]

CURVE_ID = "secp256k1"
COMPRESSED_SIZE = Fp.size() + 1

_P = int(Fp.MODULUS, 16)
_N = int(Fq.MODULUS, 16)
_B = 7
_B3 = 3 * _B
_GX = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798
_GY = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8
_SIGN_BIT = 0x80

_Coords = tuple[int, int, int]
_IDENTITY: _Coords = (0, 1, 0)


def _add(a: _Coords, b: _Coords) -> _Coords:
    x1, y1, z1 = a
    x2, y2, z2 = b
    p = _P
    t0 = x1 * x2 % p
    t1 = y1 * y2 % p
    t2 = z1 * z2 % p
    t3 = (x1 + y1) * (x2 + y2) % p
    t3 = (t3 - t0 - t1) % p
    t4 = (y1 + z1) * (y2 + z2) % p
    t4 = (t4 - t1 - t2) % p
    x3 = (x1 + z1) * (x2 + z2) % p
    y3 = (x3 - t0 - t2) % p
    t0 = 3 * t0 % p
    t2 = _B3 * t2 % p
    z3 = (t1 + t2) % p
    t1 = (t1 - t2) % p
    y3 = _B3 * y3 % p
    x3 = (t3 * t1 - t4 * y3) % p
    y3 = (t1 * z3 + y3 * t0) % p
    z3 = (z3 * t4 + t0 * t3) % p
    return x3, y3, z3


def _double(a: _Coords) -> _Coords:
    x, y, z = a
    p = _P
    t0 = y * y % p
    z3 = 8 * t0 % p
    t1 = y * z % p
    t2 = _B3 * (z * z % p) % p
    x3 = t2 * z3 % p
    y3 = (t0 + t2) % p
    z3 = t1 * z3 % p
    t0 = (t0 - 3 * t2) % p
    y3 = (x3 + t0 * y3) % p
    x3 = 2 * (t0 * (x * y % p)) % p
    return x3, y3, z3


def _multiply(point: _Coords, k: int) -> _Coords:
    result = _IDENTITY
    for bit in bin(k)[2:] if k else "":
        result = _double(result)
        if bit == "1":
            result = _add(result, point)
    return result


def _scalar(other: object) -> int | None:
    if isinstance(other, Fq):
        return int(other)
    if isinstance(other, int) and not isinstance(other, bool):
        return other % _N
    return None


def _check_length(data: bytes, length: int) -> bytes:
    data = bytes(data)
    if len(data) != length:
        raise ValueError(f"expected {length} bytes, got {len(data)}")
    return data


@dataclass(frozen=True, eq=False)
class Secp256k1(SerdeObject):
    """A secp256k1 point in projective coordinates."""

    x: Fp
    y: Fp
    z: Fp

    @classmethod
    def _from_coords(cls, coords: _Coords) -> Secp256k1:
        x, y, z = coords
        return cls(Fp(x), Fp(y), Fp(z))

    @property
    def _coords(self) -> _Coords:
        return int(self.x), int(self.y), int(self.z)

    # Construction

    @classmethod
    def identity(cls) -> Secp256k1:
        return cls._from_coords(_IDENTITY)

    @classmethod
    def generator(cls) -> Secp256k1:
        return cls._from_coords((_GX, _GY, 1))

    @classmethod
    def random(cls, rng: Any = None) -> Secp256k1:
        """A uniformly random point, drawn by sampling x until it lies on the curve."""
        while True:
            x = Fp.random(rng)
            try:
                y = (x.square() * x + _B).sqrt()
            except ValueError:
                continue
            sign = secrets.randbits(1) if rng is None else rng.getrandbits(1)
            if y.is_odd() != bool(sign):
                y = -y
            return cls(x, y, Fp.ONE)

    # Predicates

    def is_identity(self) -> bool:
        return self.z.is_zero()

    def is_on_curve(self) -> bool:
        x, y, z = self._coords
        lhs = y * y * z
        rhs = x * x * x + _B * z * z * z
        return (lhs - rhs) % _P == 0 or z == 0

    def clear_cofactor(self) -> Secp256k1:
        return self

    def is_torsion_free(self) -> bool:
        return True

    # Group operations

    def double(self) -> Secp256k1:
        return self._from_coords(_double(self._coords))

    def endo(self) -> Secp256k1:
        """The curve endomorphism ``(x, y) -> (ZETA * x, y)``."""
        return type(self)(self.x * Fp.ZETA, self.y, self.z)

    def _other_coords(self, other: object) -> _Coords | None:
        if isinstance(other, Secp256k1):
            return other._coords
        if isinstance(other, Secp256k1Affine):
            return other.to_curve()._coords
        return None

    def __add__(self, other: object) -> Secp256k1:
        coords = self._other_coords(other)
        if coords is None:
            return NotImplemented
        return self._from_coords(_add(self._coords, coords))

    __radd__ = __add__

    def __neg__(self) -> Secp256k1:
        return type(self)(self.x, -self.y, self.z)

    def __sub__(self, other: object) -> Secp256k1:
        coords = self._other_coords(other)
        if coords is None:
            return NotImplemented
        x, y, z = coords
        return self._from_coords(_add(self._coords, (x, (-y) % _P, z)))

    def __rsub__(self, other: object) -> Secp256k1:
        coords = self._other_coords(other)
        if coords is None:
            return NotImplemented
        return self._from_coords(_add(coords, (-self)._coords))

    def __mul__(self, other: object) -> Secp256k1:
        k = _scalar(other)
        if k is None:
            return NotImplemented
        return self._from_coords(_multiply(self._coords, k))

    __rmul__ = __mul__

    # Conversion

    def to_affine(self) -> Secp256k1Affine:
        if self.is_identity():
            return Secp256k1Affine.identity()
        z_inv = self.z.invert()
        return Secp256k1Affine(self.x * z_inv, self.y * z_inv)

    @classmethod
    def batch_normalize(cls, points: Iterable[Secp256k1]) -> list[Secp256k1Affine]:
        """Convert many points to affine form with a single field inversion."""
        points = list(points)
        products = []
        acc = Fp.ONE
        for point in points:
            products.append(acc)
            if not point.is_identity():
                acc = acc * point.z
        acc = acc.invert()
        result: list[Secp256k1Affine] = [Secp256k1Affine.identity()] * len(points)
        for index in reversed(range(len(points))):
            point = points[index]
            if point.is_identity():
                continue
            z_inv = acc * products[index]
            acc = acc * point.z
            result[index] = Secp256k1Affine(point.x * z_inv, point.y * z_inv)
        return result

    # Encoding

    def to_bytes(self) -> bytes:
        return self.to_affine().to_bytes()

    @classmethod
    def from_bytes(cls, data: bytes) -> Secp256k1:
        return Secp256k1Affine.from_bytes(data).to_curve()

    @classmethod
    def _raw_length(cls) -> int:
        return 3 * Fp.size()

    def to_raw_bytes(self) -> bytes:
        return self.x.to_raw_bytes() + self.y.to_raw_bytes() + self.z.to_raw_bytes()

    @classmethod
    def from_raw_bytes_unchecked(cls, data: bytes) -> Secp256k1:
        data = _check_length(data, cls._raw_length())
        size = Fp.size()
        x, y, z = (Fp.from_raw_bytes_unchecked(data[i : i + size]) for i in range(0, 3 * size, size))
        return cls(x, y, z)

    @classmethod
    def from_raw_bytes(cls, data: bytes) -> Secp256k1:
        data = _check_length(data, cls._raw_length())
        size = Fp.size()
        x, y, z = (Fp.from_raw_bytes(data[i : i + size]) for i in range(0, 3 * size, size))
        point = cls(x, y, z)
        if not point.is_on_curve():
            raise ValueError("point is not on the curve")
        return point

    # Python protocol

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Secp256k1):
            return NotImplemented
        x1, y1, z1 = self._coords
        x2, y2, z2 = other._coords
        if z1 == 0 or z2 == 0:
            return z1 == 0 and z2 == 0
        return (x1 * z2 - x2 * z1) % _P == 0 and (y1 * z2 - y2 * z1) % _P == 0

    def __hash__(self) -> int:
        return hash(self.to_affine())

    def __repr__(self) -> str:
        if self.is_identity():
            return "Secp256k1(identity)"
        affine = self.to_affine()
        return f"Secp256k1(x={affine.x!r}, y={affine.y!r})"


@dataclass(frozen=True)
class Secp256k1Affine(SerdeObject):
    """A secp256k1 point in affine coordinates; ``(0, 0)`` is the identity."""

    x: Fp
    y: Fp

    @classmethod
    def identity(cls) -> Secp256k1Affine:
        return cls(Fp.ZERO, Fp.ZERO)

    @classmethod
    def generator(cls) -> Secp256k1Affine:
        return cls(Fp(_GX), Fp(_GY))

    @classmethod
    def from_xy(cls, x: Fp, y: Fp) -> Secp256k1Affine:
        """Build a point from coordinates, raising ``ValueError`` if it is off the curve."""
        point = cls(x, y)
        if not point.is_on_curve():
            raise ValueError("point is not on the curve")
        return point

    def is_identity(self) -> bool:
        return self.x.is_zero() and self.y.is_zero()

    def is_on_curve(self) -> bool:
        return self.is_identity() or self.y.square() == self.x.square() * self.x + _B

    def to_curve(self) -> Secp256k1:
        if self.is_identity():
            return Secp256k1.identity()
        return Secp256k1(self.x, self.y, Fp.ONE)

    def coordinates(self) -> tuple[Fp, Fp]:
        """The ``(x, y)`` pair; raises ``ValueError`` for the identity."""
        if self.is_identity():
            raise ValueError("the identity has no affine coordinates")
        return self.x, self.y

    def into_coordinates(self) -> tuple[Fp, Fp]:
        return self.x, self.y

    # Group operations

    def __neg__(self) -> Secp256k1Affine:
        return type(self)(self.x, -self.y)

    def __add__(self, other: object) -> Secp256k1:
        if isinstance(other, (Secp256k1, Secp256k1Affine)):
            return self.to_curve() + other
        return NotImplemented

    def __sub__(self, other: object) -> Secp256k1:
        if isinstance(other, (Secp256k1, Secp256k1Affine)):
            return self.to_curve() - other
        return NotImplemented

    def __mul__(self, other: object) -> Secp256k1:
        if _scalar(other) is None:
            return NotImplemented
        return self.to_curve() * other

    __rmul__ = __mul__

    # Encoding

    def to_bytes(self) -> bytes:
        """Compressed form: x little-endian, then a byte whose top bit is y's parity."""
        if self.is_identity():
            return bytes(COMPRESSED_SIZE)
        flags = _SIGN_BIT if self.y.is_odd() else 0
        return self.x.to_repr() + bytes([flags])

    @classmethod
    def from_bytes(cls, data: bytes) -> Secp256k1Affine:
        """Decode the compressed form, raising ``ValueError`` if it is not a point."""
        data = _check_length(data, COMPRESSED_SIZE)
        flags = data[-1]
        if flags & ~_SIGN_BIT:
            raise ValueError("unknown flag bits set")
        y_odd = bool(flags & _SIGN_BIT)
        x = Fp.from_repr(data[:-1])
        if x.is_zero() and not y_odd:
            return cls.identity()
        y = (x.square() * x + _B).sqrt()
        if y.is_odd() != y_odd:
            y = -y
        return cls(x, y)

    @classmethod
    def _raw_length(cls) -> int:
        return 2 * Fp.size()

    def to_raw_bytes(self) -> bytes:
        return self.x.to_raw_bytes() + self.y.to_raw_bytes()

    @classmethod
    def from_raw_bytes_unchecked(cls, data: bytes) -> Secp256k1Affine:
        data = _check_length(data, cls._raw_length())
        size = Fp.size()
        return cls(Fp.from_raw_bytes_unchecked(data[:size]), Fp.from_raw_bytes_unchecked(data[size:]))

    @classmethod
    def from_raw_bytes(cls, data: bytes) -> Secp256k1Affine:
        data = _check_length(data, cls._raw_length())
        size = Fp.size()
        return cls.from_xy(Fp.from_raw_bytes(data[:size]), Fp.from_raw_bytes(data[size:]))

    def write_raw(self, writer: BinaryIO) -> None:
        writer.write(self.to_raw_bytes())