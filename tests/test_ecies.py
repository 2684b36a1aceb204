"""Tests for crypto/ecies.py module."""

from __future__ import annotations

import hashlib
import inspect

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

import cryptokits.crypto.ecies as ecies_module
from cryptokits.crypto.constants import ECIES_KDF_LENGTH, ECIES_PBKDF2_ITERATIONS, ECIES_SALT
from cryptokits.crypto.ecies import (
    EciesParams,
    ecies_crypto,
    ephemeral_key_size,
    split_envelope,
)
from cryptokits.crypto.kdf import derive_key_into
from cryptokits.crypto.keypair import KeyPair, generate_keypair
from cryptokits.crypto.secret import SecretBytes
from cryptokits.errors import DecryptionError, FormatError, UnsupportedError
from cryptokits.types import Digest, Kdf, KeyFamily, KeyFormat, Pkcs

CURVES = [
    KeyFamily.NIST_P256,
    KeyFamily.NIST_P384,
    KeyFamily.NIST_P521,
    KeyFamily.SECP256K1,
    KeyFamily.SM2,
    KeyFamily.CURVE25519,
]


@pytest.fixture(scope="module")
def keys() -> dict[KeyFamily, KeyPair]:
    """One PEM key pair per curve."""
    return {family: generate_keypair(family) for family in CURVES}


def seal(pair: KeyPair, family: KeyFamily, plaintext: bytes, **kwargs) -> bytes:
    """Encrypt to the pair's public key."""
    return ecies_crypto(
        plaintext, pair.public_key, family, Pkcs.SPKI, KeyFormat.PEM, True, **kwargs
    )


def open_(pair: KeyPair, family: KeyFamily, envelope: bytes, **kwargs) -> bytes:
    """Decrypt with the pair's private key."""
    return ecies_crypto(
        envelope, pair.private_key, family, Pkcs.PKCS8, KeyFormat.PEM, False, **kwargs
    )


class TestRoundTrip:
    """Round trips across curves and KDFs."""

    @pytest.mark.parametrize("family", CURVES)
    @pytest.mark.parametrize(
        ("kdf", "digest"),
        [
            (Kdf.PBKDF2, Digest.SHA512),
            (Kdf.HKDF, Digest.SHA256),
            (Kdf.CONCATENATION, Digest.SHA3_256),
            (Kdf.SCRYPT, Digest.SHA256),
        ],
    )
    def test_round_trip(
        self, keys: dict[KeyFamily, KeyPair], family: KeyFamily, kdf: Kdf, digest: Digest
    ) -> None:
        """Test that every curve and KDF decrypts what it encrypts."""
        pair = keys[family]
        envelope = seal(pair, family, b"attack at dawn", kdf=kdf, digest=digest)
        assert open_(pair, family, envelope, kdf=kdf, digest=digest) == b"attack at dawn"

    @pytest.mark.parametrize("family", CURVES)
    def test_empty_plaintext(self, keys: dict[KeyFamily, KeyPair], family: KeyFamily) -> None:
        """Test that an empty message yields prefix, ephemeral key and tag only."""
        pair = keys[family]
        envelope = seal(pair, family, b"")
        size = ephemeral_key_size(family)
        assert envelope[0] == size
        assert len(envelope) == 1 + size + 16
        assert open_(pair, family, envelope) == b""

    def test_fresh_ephemeral_key(self, keys: dict[KeyFamily, KeyPair]) -> None:
        """Test that two encryptions of one message differ."""
        pair = keys[KeyFamily.NIST_P256]
        a = seal(pair, KeyFamily.NIST_P256, b"same")
        b = seal(pair, KeyFamily.NIST_P256, b"same")
        assert a[1:34] != b[1:34]
        assert a != b

    def test_salt_info_and_aad(self, keys: dict[KeyFamily, KeyPair]) -> None:
        """Test custom salt, info and associated data."""
        pair = keys[KeyFamily.SM2]
        options = {"kdf": Kdf.HKDF, "salt": b"pepper", "info": b"ctx", "aad": b"header"}
        envelope = seal(pair, KeyFamily.SM2, b"payload", **options)
        assert open_(pair, KeyFamily.SM2, envelope, **options) == b"payload"

    def test_der_keys(self) -> None:
        """Test a SEC1 DER private key with its SPKI DER public key."""
        pair = generate_keypair(KeyFamily.NIST_P384, Pkcs.SEC1, KeyFormat.DER)
        envelope = ecies_crypto(
            b"hi", pair.public_key, KeyFamily.NIST_P384, Pkcs.SPKI, KeyFormat.DER, True
        )
        plaintext = ecies_crypto(
            envelope, pair.private_key, KeyFamily.NIST_P384, Pkcs.SEC1, KeyFormat.DER, False
        )
        assert plaintext == b"hi"


class TestKnownConstruction:
    """Decrypt an envelope assembled directly from primitives."""

    def test_p256_pbkdf2_default_salt(self, keys: dict[KeyFamily, KeyPair]) -> None:
        """Test the default PBKDF2-SHA512 / fixed salt / derived nonce layout."""
        pair = keys[KeyFamily.NIST_P256]
        recipient = serialization.load_pem_public_key(pair.public_key)

        ephemeral = ec.generate_private_key(ec.SECP256R1())
        shared = ephemeral.exchange(ec.ECDH(), recipient)
        okm = hashlib.pbkdf2_hmac(
            "sha512", shared, ECIES_SALT.encode(), ECIES_PBKDF2_ITERATIONS, 44
        )
        ciphertext = AESGCM(okm[:32]).encrypt(okm[32:44], b"interop", None)
        point = ephemeral.public_key().public_bytes(
            serialization.Encoding.X962, serialization.PublicFormat.CompressedPoint
        )
        envelope = bytes([len(point)]) + point + ciphertext

        assert open_(pair, KeyFamily.NIST_P256, envelope) == b"interop"


class TestFailures:
    """Authentication and envelope failures."""

    def test_tampered_ciphertext(self, keys: dict[KeyFamily, KeyPair]) -> None:
        """Test that a flipped ciphertext bit fails as DecryptionError."""
        pair = keys[KeyFamily.NIST_P256]
        envelope = bytearray(seal(pair, KeyFamily.NIST_P256, b"data"))
        envelope[-1] ^= 1
        with pytest.raises(DecryptionError, match="decryption failed"):
            open_(pair, KeyFamily.NIST_P256, bytes(envelope))

    def test_wrong_private_key(self, keys: dict[KeyFamily, KeyPair]) -> None:
        """Test that another recipient cannot decrypt."""
        envelope = seal(keys[KeyFamily.CURVE25519], KeyFamily.CURVE25519, b"data")
        other = generate_keypair(KeyFamily.CURVE25519)
        with pytest.raises(DecryptionError):
            open_(other, KeyFamily.CURVE25519, envelope)

    def test_wrong_aad(self, keys: dict[KeyFamily, KeyPair]) -> None:
        """Test that different associated data fails."""
        pair = keys[KeyFamily.SECP256K1]
        envelope = seal(pair, KeyFamily.SECP256K1, b"data", kdf=Kdf.HKDF, aad=b"a")
        with pytest.raises(DecryptionError):
            open_(pair, KeyFamily.SECP256K1, envelope, kdf=Kdf.HKDF, aad=b"b")

    def test_wrong_kdf(self, keys: dict[KeyFamily, KeyPair]) -> None:
        """Test that decrypting with another KDF fails."""
        pair = keys[KeyFamily.NIST_P256]
        envelope = seal(pair, KeyFamily.NIST_P256, b"data", kdf=Kdf.HKDF)
        with pytest.raises(DecryptionError):
            open_(pair, KeyFamily.NIST_P256, envelope, kdf=Kdf.CONCATENATION)

    def test_empty_envelope(self, keys: dict[KeyFamily, KeyPair]) -> None:
        """Test that an empty envelope is a format error."""
        with pytest.raises(FormatError, match="empty"):
            open_(keys[KeyFamily.NIST_P256], KeyFamily.NIST_P256, b"")

    def test_length_prefix_overrun(self, keys: dict[KeyFamily, KeyPair]) -> None:
        """Test that a prefix longer than the envelope is a format error."""
        with pytest.raises(FormatError, match="exceeds envelope"):
            open_(keys[KeyFamily.NIST_P256], KeyFamily.NIST_P256, b"\x21" + bytes(10))

    def test_wrong_ephemeral_length(self) -> None:
        """Test that the prefix must match the curve's point size."""
        envelope = b"\x41" + bytes(65) + bytes(16)
        with pytest.raises(FormatError, match="does not match nistp256"):
            split_envelope(envelope, KeyFamily.NIST_P256)

    def test_invalid_ephemeral_point(self, keys: dict[KeyFamily, KeyPair]) -> None:
        """Test that an ephemeral key that is not a point is a format error."""
        envelope = b"\x21\x05" + bytes(32) + bytes(16)
        with pytest.raises(FormatError):
            open_(keys[KeyFamily.NIST_P256], KeyFamily.NIST_P256, envelope)

    def test_x25519_low_order_point(self, keys: dict[KeyFamily, KeyPair]) -> None:
        """Test that an all-zero X25519 ephemeral key is rejected."""
        envelope = b"\x20" + bytes(32) + bytes(16)
        with pytest.raises(FormatError, match="Invalid X25519 public key"):
            open_(keys[KeyFamily.CURVE25519], KeyFamily.CURVE25519, envelope)

    def test_rsa_unsupported(self) -> None:
        """Test that ECIES refuses RSA keys."""
        with pytest.raises(UnsupportedError, match="not defined for RSA"):
            ecies_crypto(b"x", b"", KeyFamily.RSA, Pkcs.SPKI, KeyFormat.PEM, True)

    def test_unknown_algorithm(self, keys: dict[KeyFamily, KeyPair]) -> None:
        """Test that only AES-GCM is accepted."""
        with pytest.raises(UnsupportedError, match="Unsupported ECIES algorithm"):
            seal(keys[KeyFamily.NIST_P256], KeyFamily.NIST_P256, b"x", algorithm="ChaCha20")


class TestEciesParams:
    """Tests for the parameter defaults."""

    def test_defaults(self) -> None:
        """Test PBKDF2-SHA512 with the built-in salt as the default."""
        params = EciesParams()
        assert params.kdf is Kdf.PBKDF2
        assert params.digest is Digest.SHA512
        assert params.salt is None


class TestEnvelopeMalleability:
    """The compressed point's sign byte does not reach the KDF."""

    @pytest.mark.parametrize(
        "family",
        [KeyFamily.NIST_P256, KeyFamily.NIST_P521, KeyFamily.SECP256K1, KeyFamily.SM2],
    )
    def test_flipped_point_prefix_still_decrypts(
        self, keys: dict[KeyFamily, KeyPair], family: KeyFamily
    ) -> None:
        """Test that -P as ephemeral key derives the same key as P."""
        pair = keys[family]
        envelope = bytearray(seal(pair, family, b"hello"))
        assert envelope[1] in (0x02, 0x03)
        envelope[1] ^= 0x01
        assert open_(pair, family, bytes(envelope)) == b"hello"


class TestSecretWiping:
    """Key material is zeroed once an operation returns."""

    def test_derived_key_and_nonce_wiped(
        self, keys: dict[KeyFamily, KeyPair], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that the KDF output buffer is all zeros after encrypt and decrypt."""
        buffers: list[bytearray] = []

        def recording_derive_key_into(*args, **kwargs) -> None:
            derive_key_into(*args, **kwargs)
            buffers.append(args[3])

        monkeypatch.setattr(ecies_module, "derive_key_into", recording_derive_key_into)
        pair = keys[KeyFamily.NIST_P256]
        envelope = seal(pair, KeyFamily.NIST_P256, b"secret", kdf=Kdf.HKDF)
        assert open_(pair, KeyFamily.NIST_P256, envelope, kdf=Kdf.HKDF) == b"secret"

        assert len(buffers) == 2
        for buffer in buffers:
            assert isinstance(buffer, bytearray)
            assert buffer == bytearray(ECIES_KDF_LENGTH)

    @pytest.mark.parametrize("family", [KeyFamily.SM2, KeyFamily.CURVE25519])
    def test_shared_secret_wiped(
        self,
        keys: dict[KeyFamily, KeyPair],
        monkeypatch: pytest.MonkeyPatch,
        family: KeyFamily,
    ) -> None:
        """Test that the guarded shared secret is all zeros afterwards."""
        secrets: list[SecretBytes] = []
        seal_inner = ecies_module._seal

        def recording_seal(shared: SecretBytes, *args, **kwargs) -> bytes:
            secrets.append(shared)
            return seal_inner(shared, *args, **kwargs)

        monkeypatch.setattr(ecies_module, "_seal", recording_seal)
        pair = keys[family]
        open_(pair, family, seal(pair, family, b"x", kdf=Kdf.CONCATENATION), kdf=Kdf.CONCATENATION)

        assert len(secrets) == 2
        for shared in secrets:
            assert len(shared) > 0
            assert shared.data == bytearray(len(shared))


class TestModuleLayout:
    """Tests for the crypto package namespace."""

    def test_submodule_not_shadowed(self) -> None:
        """Test that the package attribute still resolves to the ecies module."""
        import cryptokits.crypto

        assert inspect.ismodule(cryptokits.crypto.ecies)
        assert cryptokits.crypto.ecies.derive_key_into is derive_key_into
        assert callable(cryptokits.crypto.ecies_crypto)
