"""Tests for crypto/kdf.py module."""

import hashlib

import pytest
from cryptography.hazmat.primitives import hashes

from cryptokits.crypto.kdf import derive_key, derive_key_into, get_hash
from cryptokits.errors import RequestValidationError, UnsupportedError
from cryptokits.types import Digest, Kdf


class TestGetHash:
    """Tests for the digest selector."""

    @pytest.mark.parametrize(
        ("digest", "name", "size"),
        [
            (Digest.SHA1, "sha1", 20),
            (Digest.SHA256, "sha256", 32),
            (Digest.SHA384, "sha384", 48),
            (Digest.SHA512, "sha512", 64),
            (Digest.SHA3_256, "sha3-256", 32),
            (Digest.SHA3_384, "sha3-384", 48),
            (Digest.SHA3_512, "sha3-512", 64),
        ],
    )
    def test_digest_mapping(self, digest: Digest, name: str, size: int) -> None:
        """Test that every selector maps to the matching hash."""
        algorithm = get_hash(digest)
        assert isinstance(algorithm, hashes.HashAlgorithm)
        assert algorithm.name == name
        assert algorithm.digest_size == size

    def test_unknown_digest_raises(self) -> None:
        """Test that an unknown digest raises UnsupportedError."""
        with pytest.raises(UnsupportedError, match="Unsupported digest"):
            get_hash("md5")


class TestHkdf:
    """Tests for HKDF."""

    def test_rfc5869_case_1(self) -> None:
        """Test RFC 5869 test case 1 (SHA-256)."""
        okm = derive_key(
            Kdf.HKDF,
            Digest.SHA256,
            bytes([0x0B] * 22),
            42,
            salt=bytes(range(0x0D)),
            info=bytes(range(0xF0, 0xFA)),
        )
        assert okm.hex() == (
            "3cb25f25faacd57a90434f64d0362f2a2d2d0a90cf1a5a4c5db02d56ecc4c5bf"
            "34007208d5b887185865"
        )

    def test_missing_salt_and_info(self) -> None:
        """Test that HKDF runs without salt or info."""
        assert len(derive_key(Kdf.HKDF, Digest.SHA3_256, b"secret", 64)) == 64

    def test_maximum_length(self) -> None:
        """Test that 255 * digest size is accepted and one more is not."""
        assert len(derive_key(Kdf.HKDF, Digest.SHA1, b"secret", 255 * 20)) == 255 * 20
        with pytest.raises(RequestValidationError, match="maximum is 5100"):
            derive_key(Kdf.HKDF, Digest.SHA1, b"secret", 255 * 20 + 1)


class TestConcatKdf:
    """Tests for the single-step Concatenation KDF."""

    def test_matches_single_block_definition(self) -> None:
        """Test that output is H(counter || Z || OtherInfo) truncated."""
        z = b"shared secret"
        other = b"other info"
        expected = hashlib.sha256(b"\x00\x00\x00\x01" + z + other).digest()[:20]
        assert derive_key(Kdf.CONCATENATION, Digest.SHA256, z, 20, info=other) == expected

    def test_ignores_salt(self) -> None:
        """Test that the salt does not enter the derivation."""
        a = derive_key(Kdf.CONCATENATION, Digest.SHA512, b"z", 32, salt=b"a")
        b = derive_key(Kdf.CONCATENATION, Digest.SHA512, b"z", 32, salt=b"b")
        assert a == b


class TestPbkdf2:
    """Tests for PBKDF2-HMAC."""

    def test_rfc6070_one_iteration(self) -> None:
        """Test RFC 6070 vector with c=1."""
        okm = derive_key(Kdf.PBKDF2, Digest.SHA1, b"password", 20, salt=b"salt", iterations=1)
        assert okm.hex() == "0c60c80f961f0e71f3a9b524af6012062fe037a6"

    def test_rfc6070_two_iterations(self) -> None:
        """Test RFC 6070 vector with c=2."""
        okm = derive_key(Kdf.PBKDF2, Digest.SHA1, b"password", 20, salt=b"salt", iterations=2)
        assert okm.hex() == "ea6c014dc72d6f8ccd1ed92ace1d41f0d8de8957"

    def test_default_iterations_match_hashlib(self) -> None:
        """Test that the default work factor is 600000 iterations."""
        okm = derive_key(Kdf.PBKDF2, Digest.SHA256, b"pw", 32, salt=b"salty")
        assert okm == hashlib.pbkdf2_hmac("sha256", b"pw", b"salty", 600_000, 32)

    def test_requires_salt(self) -> None:
        """Test that PBKDF2 without a salt raises."""
        with pytest.raises(RequestValidationError, match="pbkdf2 requires a salt"):
            derive_key(Kdf.PBKDF2, Digest.SHA256, b"pw", 32)

    def test_empty_salt_rejected(self) -> None:
        """Test that an empty salt counts as missing."""
        with pytest.raises(RequestValidationError, match="requires a salt"):
            derive_key(Kdf.PBKDF2, Digest.SHA256, b"pw", 32, salt=b"")


class TestScrypt:
    """Tests for Scrypt."""

    def test_matches_hashlib(self) -> None:
        """Test that Scrypt uses N=2^17, r=8, p=1 and ignores the digest."""
        a = derive_key(Kdf.SCRYPT, Digest.SHA256, b"pw", 32, salt=b"salt")
        b = derive_key(Kdf.SCRYPT, Digest.SHA3_512, b"pw", 32, salt=b"salt")
        assert a == b
        expected = hashlib.scrypt(
            b"pw", salt=b"salt", n=2**17, r=8, p=1, maxmem=2**28, dklen=32
        )
        assert a == expected

    def test_requires_salt(self) -> None:
        """Test that Scrypt without a salt raises."""
        with pytest.raises(RequestValidationError, match="scrypt requires a salt"):
            derive_key(Kdf.SCRYPT, Digest.SHA256, b"pw", 32)


class TestDeriveKeyValidation:
    """Tests for request validation in derive_key()."""

    @pytest.mark.parametrize("kdf", list(Kdf))
    def test_zero_length_rejected(self, kdf: Kdf) -> None:
        """Test that a zero output length is rejected for every KDF."""
        with pytest.raises(RequestValidationError, match="at least 1"):
            derive_key(kdf, Digest.SHA256, b"ikm", 0, salt=b"salt")

    def test_unknown_kdf_raises(self) -> None:
        """Test that an unknown KDF raises UnsupportedError."""
        with pytest.raises(UnsupportedError, match="Unsupported KDF"):
            derive_key("argon2", Digest.SHA256, b"ikm", 32)

    def test_accepts_string_selectors(self) -> None:
        """Test that plain string selectors work."""
        assert len(derive_key("hkdf", "sha384", b"ikm", 48)) == 48


class TestOutputLengths:
    """Arbitrary output lengths and determinism."""

    @pytest.mark.parametrize("kdf", [Kdf.HKDF, Kdf.CONCATENATION])
    @pytest.mark.parametrize("length", [1, 16, 44, 100])
    def test_length_and_prefix(self, kdf: Kdf, length: int) -> None:
        """Test exact lengths, and that shorter outputs are prefixes of longer ones."""
        okm = derive_key(kdf, Digest.SHA256, b"ikm", length, info=b"info")
        assert len(okm) == length
        longer = derive_key(kdf, Digest.SHA256, b"ikm", 200, info=b"info")
        assert longer[:length] == okm

    def test_deterministic(self) -> None:
        """Test that equal inputs derive equal keys."""
        a = derive_key(Kdf.PBKDF2, Digest.SHA3_512, b"pw", 44, salt=b"s", iterations=10)
        b = derive_key(Kdf.PBKDF2, Digest.SHA3_512, b"pw", 44, salt=b"s", iterations=10)
        assert a == b
        assert len(a) == 44


class TestDeriveKeyInto:
    """Tests for derivation into a caller-owned buffer."""

    @pytest.mark.parametrize(
        ("kdf", "options"),
        [
            (Kdf.HKDF, {"salt": b"salt", "info": b"info"}),
            (Kdf.CONCATENATION, {"info": b"info"}),
            (Kdf.PBKDF2, {"salt": b"salt", "iterations": 5}),
            (Kdf.SCRYPT, {"salt": b"salt"}),
        ],
    )
    def test_matches_derive_key(self, kdf: Kdf, options: dict) -> None:
        """Test that the buffer receives the same bytes derive_key returns."""
        out = bytearray(44)
        derive_key_into(kdf, Digest.SHA256, b"ikm", out, **options)
        assert bytes(out) == derive_key(kdf, Digest.SHA256, b"ikm", 44, **options)

    def test_writes_in_place(self) -> None:
        """Test that the caller's buffer object itself is filled."""
        out = bytearray(32)
        view = memoryview(out)
        derive_key_into(Kdf.HKDF, Digest.SHA512, b"ikm", out)
        assert view.tobytes() == derive_key(Kdf.HKDF, Digest.SHA512, b"ikm", 32)

    def test_empty_buffer_rejected(self) -> None:
        """Test that a zero-length buffer fails validation."""
        with pytest.raises(RequestValidationError, match="at least 1"):
            derive_key_into(Kdf.HKDF, Digest.SHA256, b"ikm", bytearray())
