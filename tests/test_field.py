import io
import random

import pytest
from hypothesis import given
from hypothesis import strategies as st

from koblitz.field import FieldElement, Fp

SEED = int.from_bytes(
    bytes(
        [0x59, 0x62, 0xBE, 0x5D, 0x76, 0x3D, 0x31, 0x8D,
         0x17, 0xDB, 0x37, 0x32, 0x54, 0x06, 0xBC, 0xE5]
    ),
    "little",
)
ROUNDS = 300
P = int(Fp.MODULUS, 16)

elements = st.integers(min_value=0, max_value=(1 << 512) - 1).map(Fp)


@pytest.fixture
def rng():
    return random.Random(SEED)


def test_constants():
    assert Fp.MODULUS == "0xfffffffffffffffffffffffffffffffffffffffffffffffffffffffefffffc2f"
    assert Fp(2) * Fp.TWO_INV == Fp.ONE
    assert Fp.S == 1
    assert Fp.NUM_BITS == 256
    assert Fp.CAPACITY == 255


def test_delta():
    assert Fp.DELTA == Fp.MULTIPLICATIVE_GENERATOR.pow([1 << Fp.S, 0, 0, 0])


def test_root_of_unity():
    assert Fp.ROOT_OF_UNITY.pow_vartime([1 << Fp.S, 0, 0, 0]) == Fp.one()


def test_inv_root_of_unity():
    assert Fp.ROOT_OF_UNITY_INV == Fp.ROOT_OF_UNITY.invert()


def test_zeta_is_cube_root_of_unity():
    assert Fp.ZETA != Fp.ONE
    assert Fp.ZETA.pow(3) == Fp.ONE


def test_sqrt_of_two_inv_squared():
    v = Fp.TWO_INV.square().sqrt()
    assert v == Fp.TWO_INV or -v == Fp.TWO_INV


def test_sqrt_random(rng):
    for _ in range(ROUNDS):
        a = Fp.random(rng)
        b = a.square().sqrt()
        assert a == b or a == -b


def test_generic_sqrt_agrees_with_fp_sqrt(rng):
    for _ in range(50):
        square = Fp.random(rng).square()
        root = FieldElement.sqrt(square)
        assert root.square() == square


def test_sqrt_of_non_residue_raises():
    with pytest.raises(ValueError):
        Fp.MULTIPLICATIVE_GENERATOR.sqrt()
    with pytest.raises(ValueError):
        FieldElement.sqrt(Fp.MULTIPLICATIVE_GENERATOR)


def test_sqrt_ratio_cases():
    ok, root = Fp.sqrt_ratio(Fp(4), Fp.ONE)
    assert ok and root.square() == Fp(4)

    assert Fp.sqrt_ratio(Fp.ZERO, Fp.ZERO) == (True, Fp.ZERO)
    assert Fp.sqrt_ratio(Fp.ONE, Fp.ZERO) == (False, Fp.ZERO)

    ok, root = Fp.sqrt_ratio(Fp(3), Fp.ONE)
    assert not ok
    assert root.square() == Fp.ROOT_OF_UNITY * Fp(3)


def test_sqrt_ratio_random(rng):
    for _ in range(100):
        num, div = Fp.random(rng), Fp.random(rng)
        ok, root = Fp.sqrt_ratio(num, div)
        if ok:
            assert root.square() * div == num
        else:
            assert root.square() * div == Fp.ROOT_OF_UNITY * num


def test_zero_properties(rng):
    assert Fp.ZERO.is_zero()
    assert (-Fp.ZERO).is_zero()
    with pytest.raises(ZeroDivisionError):
        Fp.ZERO.invert()
    a = Fp.random(rng)
    assert (a * Fp.ZERO).is_zero()
    assert a + Fp.ZERO == a


def test_multiplication_commutes_and_associates(rng):
    for _ in range(ROUNDS):
        a, b, c = Fp.random(rng), Fp.random(rng), Fp.random(rng)
        assert (a * b) * c == (a * c) * b == (b * c) * a


def test_addition_commutes_and_associates(rng):
    for _ in range(ROUNDS):
        a, b, c = Fp.random(rng), Fp.random(rng), Fp.random(rng)
        assert (a + b) + c == (a + c) + b == (b + c) + a


def test_subtraction(rng):
    for _ in range(ROUNDS):
        a, b = Fp.random(rng), Fp.random(rng)
        assert ((a - b) + (b - a)).is_zero()


def test_negation(rng):
    for _ in range(ROUNDS):
        a = Fp.random(rng)
        assert (-a + a).is_zero()


def test_doubling(rng):
    for _ in range(ROUNDS):
        a = Fp.random(rng)
        assert a + a == a.double()


def test_squaring(rng):
    for _ in range(ROUNDS):
        a = Fp.random(rng)
        assert a * a == a.square()


def test_inversion(rng):
    for _ in range(ROUNDS):
        a = Fp.random(rng)
        assert a * a.invert() == Fp.ONE


def test_expansion(rng):
    for _ in range(ROUNDS):
        a, b, c, d = (Fp.random(rng) for _ in range(4))
        assert (a + b) * (c + d) == a * c + b * c + a * d + b * d


def test_serialization_round_trip(rng):
    for _ in range(ROUNDS):
        a = Fp.random(rng)
        assert Fp.from_raw_bytes(a.to_raw_bytes()) == a
        buf = io.BytesIO()
        a.write_raw(buf)
        buf.seek(0)
        assert Fp.read_raw(buf) == a


def test_raw_bytes_are_montgomery_form():
    # R = 2^256 mod p = 0x1000003d1
    assert Fp.ONE.to_raw_bytes() == (0x1000003D1).to_bytes(32, "little")
    assert Fp.ZERO.to_raw_bytes() == bytes(32)


def test_from_raw_bytes_rejects_invalid():
    with pytest.raises(ValueError):
        Fp.from_raw_bytes(P.to_bytes(32, "little"))
    with pytest.raises(ValueError):
        Fp.from_raw_bytes(bytes(31))
    assert Fp.from_raw_bytes_unchecked(P.to_bytes(32, "little")) == Fp.ZERO


def test_read_raw_short_stream():
    with pytest.raises(EOFError):
        Fp.read_raw(io.BytesIO(bytes(10)))


def test_repr_encoding():
    assert Fp.ONE.to_repr() == b"\x01" + bytes(31)
    assert Fp.from_repr(b"\x07" + bytes(31)) == Fp(7)
    with pytest.raises(ValueError):
        Fp.from_repr(P.to_bytes(32, "little"))
    with pytest.raises(ValueError):
        Fp.from_repr(bytes(33))


def test_from_raw_limbs():
    assert Fp.from_raw([7, 0, 0, 0]) == Fp(7)
    modulus_limbs = [
        0xFFFFFFFEFFFFFC2F,
        0xFFFFFFFFFFFFFFFF,
        0xFFFFFFFFFFFFFFFF,
        0xFFFFFFFFFFFFFFFF,
    ]
    assert Fp.from_raw(modulus_limbs) == Fp.ZERO
    assert int(Fp.from_raw([1, 2, 3, 4])) == 1 | 2 << 64 | 3 << 128 | 4 << 192
    with pytest.raises(ValueError):
        Fp.from_raw([1, 2, 3])
    with pytest.raises(ValueError):
        Fp.from_raw([1 << 64, 0, 0, 0])


def test_from_u512_and_uniform_bytes_agree(rng):
    for _ in range(50):
        data = rng.randbytes(64)
        limbs = [int.from_bytes(data[i:i + 8], "little") for i in range(0, 64, 8)]
        assert Fp.from_uniform_bytes(data) == Fp.from_u512(limbs)
    assert Fp.from_uniform_bytes(P.to_bytes(64, "little")) == Fp.ZERO


def test_from_u128():
    assert Fp.from_u128(5) == Fp(5)
    with pytest.raises(ValueError):
        Fp.from_u128(1 << 128)


def test_is_odd():
    assert Fp(3).is_odd()
    assert not Fp(4).is_odd()
    assert (-Fp.ONE).is_odd() is False


def test_size():
    assert Fp.size() == 32


def test_base_class_has_no_modulus():
    with pytest.raises(TypeError):
        FieldElement(1)


def test_int_operands_and_sum():
    assert Fp(5) + 3 == Fp(8)
    assert 10 - Fp(4) == Fp(6)
    assert sum([Fp(1), Fp(2), Fp(3)]) == Fp(6)


@given(elements)
def test_repr_round_trip(a):
    assert Fp.from_repr(a.to_repr()) == a


@given(elements)
def test_raw_round_trip(a):
    assert Fp.from_raw_bytes(a.to_raw_bytes()) == a
    assert Fp.from_raw_bytes_unchecked(a.to_raw_bytes()) == a


@given(elements, elements)
def test_distributive(a, b):
    assert (a + b).square() == a.square() + Fp(2) * a * b + b.square()


@given(elements)
def test_hash_consistent_with_equality(a):
    copy = Fp.from_repr(a.to_repr())
    assert hash(copy) == hash(a)
    assert {a, copy} == {a}