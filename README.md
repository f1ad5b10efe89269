# koblitz

Pure Python arithmetic for the secp256k1 elliptic curve `y^2 = x^3 + 7`.
The package has these modules:

- `koblitz.field`: `FieldElement`, the base class for prime field elements,
  and `Fp`, the base field with modulus
  `0xfffffffffffffffffffffffffffffffffffffffffffffffffffffffefffffc2f`
- `koblitz.scalar`: `Fq`, the scalar field with modulus
  `0xfffffffffffffffffffffffffffffffebaaedce6af48a03bbfd25e8cd0364141`
- `koblitz.curve`: `Secp256k1` for projective points and `Secp256k1Affine`
  for affine points
- `koblitz.serde`: `SerdeObject`, the base class for raw byte encoding, with
  `to_raw_bytes`, `from_raw_bytes`, `from_raw_bytes_unchecked`, `read_raw`,
  `read_raw_unchecked` and `write_raw`
- `koblitz.arith`: `adc`, `sbb` and `mac`, the add-with-carry,
  subtract-with-borrow and multiply-accumulate helpers on 64-bit limbs

The code makes no attempt to run in constant time. It suits testing,
prototyping and teaching. It is not meant to protect secrets.

## Installing

```
pip install .
```

## Field arithmetic

```python
from koblitz.field import Fp

a = Fp.from_u128(5)
b = a.invert()
assert a * b == Fp.one()
assert a.square().sqrt() in (a, -a)

raw = a.to_raw_bytes()
assert Fp.from_raw_bytes(raw) == a
```

Elements support `+`, `-`, `*`, unary `-` and `**`. Plain ints are also
accepted as operands and are reduced modulo the field's prime. Other methods
are `double`, `square`, `pow` and `pow_vartime`, `invert`, `sqrt`,
`sqrt_ratio`, `is_zero` and `is_odd`. An exponent may be an int or a sequence
of little-endian 64-bit limbs.

Ways to build an element:

- `zero` and `one`
- `random(rng)`: takes any object with `getrandbits`, and uses `secrets` when
  no rng is given
- `from_raw`: four 64-bit limbs
- `from_u512`: eight 64-bit limbs
- `from_u128`
- `from_repr`
- `from_uniform_bytes`: 64 bytes, reduced modulo p

There are two encodings:

- `to_repr` / `from_repr` use the canonical 32-byte little-endian value.
- `to_raw_bytes` / `from_raw_bytes` use the 32-byte little-endian Montgomery
  form, `a * 2**256 mod p`.

Errors:

- `invert` raises `ZeroDivisionError` for zero.
- `sqrt` raises `ValueError` for a non-residue.
- `from_repr` and `from_raw_bytes` raise `ValueError` when the value is not
  below the modulus, or when the input is the wrong length.
- `from_raw_bytes_unchecked` only checks the length.

Each field class holds its constants as elements: `ZERO`, `ONE`,
`MULTIPLICATIVE_GENERATOR`, `TWO_INV`, `ROOT_OF_UNITY`, `ROOT_OF_UNITY_INV`,
`DELTA` and `ZETA`, along with `S`, `NUM_BITS`, `CAPACITY` and the hex string
`MODULUS`.

## Curve arithmetic

```python
import random
from koblitz.curve import Secp256k1
from koblitz.scalar import Fq

g = Secp256k1.generator()
sk = Fq.random(random.SystemRandom())
pk = (g * sk).to_affine()
assert pk.is_on_curve()

encoded = pk.to_bytes()
assert type(pk).from_bytes(encoded) == pk
```

Operations on points:

- Points can be added, subtracted and negated. Addition and subtraction
  accept a mix of projective and affine points, and always return a
  `Secp256k1`.
- Multiplying a point by an `Fq` or an int gives a scalar multiple.
- `Secp256k1.batch_normalize(points)` returns a list of affine points, using
  a single field inversion.
- `endo()` maps `(x, y)` to `(ZETA * x, y)`. For the generator this equals
  `g * Fq.ZETA`.

The identity point:

- In projective form it is `(0 : 1 : 0)`.
- In affine form it is `(0, 0)`.
- `Secp256k1Affine.coordinates()` raises `ValueError` for it.
- `into_coordinates()` returns the pair as stored.
- `Secp256k1Affine.from_xy` raises `ValueError` for a point that is off the
  curve.

Encodings of points:

- `to_bytes` / `from_bytes` use a 33-byte compressed form: the x coordinate
  as 32 little-endian bytes, then a byte whose top bit is the parity of y. The
  identity encodes as all zeros. `from_bytes` raises `ValueError` for unknown
  flag bits, for an x not below the modulus, or for an x that has no point.
- `to_raw_bytes` / `from_raw_bytes` write the Montgomery forms of the
  coordinates one after another: 96 bytes for a projective point and 64 for
  an affine one. The checked readers raise `ValueError` for a point that is
  off the curve.

## What it does not do

The package gives field and group arithmetic only. It has no signing or
verification routines, no hashing to the curve, and no key formats. It has no
command-line tool.

## Running the tests

```
pip install .[test]
pytest
```