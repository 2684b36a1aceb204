"""Tests for crypto/curves.py and crypto/edwards.py."""

import pytest
from cryptography.hazmat.primitives import serialization

from cryptokits.crypto.curves import Sm2PublicKey, get_curve
from cryptokits.crypto.edwards import (
    Ed25519Backend,
    to_x25519_private_key,
    to_x25519_public_key,
)
from cryptokits.errors import FormatError, UnsupportedError
from cryptokits.types import KeyFamily

ELLIPTIC = [
    KeyFamily.NIST_P256,
    KeyFamily.NIST_P384,
    KeyFamily.NIST_P521,
    KeyFamily.SECP256K1,
    KeyFamily.SM2,
]

# GB/T 32918.5 generator
SM2_GX = 0x32C4AE2C1F1981195F9904466A39C9948FE30BBFF2660BE1715A4589334C74C7
SM2_GY = 0xBC3736A2F4F6779C59BDCEE36B692153D0A9877CC62A474002DF32E52139F0A0


class TestEcdh:
    """Tests for key agreement on every Weierstrass curve."""

    @pytest.mark.parametrize("family", ELLIPTIC)
    def test_shared_secret_agrees(self, family: KeyFamily) -> None:
        """Test that both sides derive the same field-sized secret."""
        curve = get_curve(family)
        alice = curve.generate_private_key()
        bob = curve.generate_private_key()

        with curve.exchange(alice, curve.public_key(bob)) as a:
            with curve.exchange(bob, curve.public_key(alice)) as b:
                assert bytes(a.data) == bytes(b.data)
                assert len(a) == curve.field_size

    @pytest.mark.parametrize("family", ELLIPTIC)
    def test_point_encoding_round_trip(self, family: KeyFamily) -> None:
        """Test compressed and uncompressed points decode to the same key."""
        curve = get_curve(family)
        public = curve.public_key(curve.generate_private_key())

        compressed = curve.encode_point(public, compressed=True)
        uncompressed = curve.encode_point(public, compressed=False)
        assert len(compressed) == curve.encoded_point_size(compressed=True)
        assert len(uncompressed) == curve.encoded_point_size(compressed=False)
        assert compressed[0] in (2, 3)
        assert uncompressed[0] == 4

        decoded = curve.decode_point(compressed)
        assert curve.encode_point(decoded, compressed=False) == uncompressed

    @pytest.mark.parametrize("family", ELLIPTIC)
    def test_garbage_point_rejected(self, family: KeyFamily) -> None:
        """Test that a malformed point is a format error."""
        curve = get_curve(family)
        with pytest.raises(FormatError):
            curve.decode_point(b"\x05" + bytes(curve.field_size))

    def test_field_sizes(self) -> None:
        """Test the compressed point sizes used by ECIES envelopes."""
        sizes = {family: get_curve(family).encoded_point_size() for family in ELLIPTIC}
        assert sizes == {
            KeyFamily.NIST_P256: 33,
            KeyFamily.NIST_P384: 49,
            KeyFamily.NIST_P521: 67,
            KeyFamily.SECP256K1: 33,
            KeyFamily.SM2: 33,
        }

    def test_unknown_curve(self) -> None:
        """Test that a non-Weierstrass family has no curve."""
        with pytest.raises(UnsupportedError, match="Unsupported curve"):
            get_curve(KeyFamily.CURVE25519)


class TestSm2:
    """Tests for SM2 point arithmetic."""

    def test_scalar_one_is_generator(self) -> None:
        """Test that the private scalar 1 maps to the standard generator."""
        curve = get_curve(KeyFamily.SM2)
        key = curve._private_key(1)
        assert key.public_key == Sm2PublicKey(SM2_GX, SM2_GY)

    def test_scalar_multiplication_is_linear(self) -> None:
        """Test that 2 * (3 * G) equals 6 * G."""
        curve = get_curve(KeyFamily.SM2)
        three = curve._private_key(3).public_key
        six = curve._private_key(6).public_key
        assert curve._multiply(2, three) == six

    def test_generator_decompresses(self) -> None:
        """Test that the compressed generator decodes to the known y."""
        curve = get_curve(KeyFamily.SM2)
        compressed = bytes([2 + (SM2_GY & 1)]) + SM2_GX.to_bytes(32, "big")
        assert curve.decode_point(compressed) == Sm2PublicKey(SM2_GX, SM2_GY)

    def test_off_curve_point_rejected(self) -> None:
        """Test that an uncompressed point off the curve is rejected."""
        curve = get_curve(KeyFamily.SM2)
        point = b"\x04" + SM2_GX.to_bytes(32, "big") + (SM2_GY ^ 1).to_bytes(32, "big")
        with pytest.raises(FormatError, match="not on the curve"):
            curve.decode_point(point)

    def test_scalar_out_of_range(self) -> None:
        """Test that zero is not a valid private scalar."""
        curve = get_curve(KeyFamily.SM2)
        with pytest.raises(FormatError, match="out of range"):
            curve._private_key(0)


class TestEdwardsConversion:
    """Tests for the Ed25519 to X25519 mapping."""

    def test_converted_keys_match(self) -> None:
        """Test that the converted private key's public half is the converted public key."""
        backend = Ed25519Backend()
        private = backend.generate_private_key()

        x_private = to_x25519_private_key(private)
        x_public = to_x25519_public_key(backend.public_key(private))

        raw = serialization.Encoding.Raw, serialization.PublicFormat.Raw
        assert x_private.public_key().public_bytes(*raw) == x_public.public_bytes(*raw)

    def test_conversion_supports_exchange(self) -> None:
        """Test X25519 agreement between two converted Ed25519 keys."""
        backend = Ed25519Backend()
        alice = backend.generate_private_key()
        bob = backend.generate_private_key()

        a = to_x25519_private_key(alice).exchange(to_x25519_public_key(bob.public_key()))
        b = to_x25519_private_key(bob).exchange(to_x25519_public_key(alice.public_key()))
        assert a == b
