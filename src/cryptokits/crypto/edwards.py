"""Curve25519 key backend for cryptokits.

Keys are stored as Ed25519 (PKCS8 / SPKI). Encryption converts them to
their X25519 (Montgomery) equivalents with libsodium.
"""

from __future__ import annotations

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519, x25519
from nacl.bindings import (
    crypto_sign_ed25519_pk_to_curve25519,
    crypto_sign_ed25519_sk_to_curve25519,
)
from nacl.exceptions import CryptoError

from ..errors import FormatError
from ..types import KeyFamily, Pkcs
from .backend import KeyBackend


class Ed25519Backend(KeyBackend):
    """Ed25519 keys, PKCS8 for private and SPKI for public."""

    family = KeyFamily.CURVE25519
    private_containers = (Pkcs.PKCS8,)
    public_containers = (Pkcs.SPKI,)

    def generate_private_key(self) -> ed25519.Ed25519PrivateKey:
        return ed25519.Ed25519PrivateKey.generate()

    def public_key(self, private_key: ed25519.Ed25519PrivateKey) -> ed25519.Ed25519PublicKey:
        return private_key.public_key()

    def load_private_der(self, der: bytes, pkcs: Pkcs) -> ed25519.Ed25519PrivateKey:
        try:
            key = serialization.load_der_private_key(der, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise FormatError(f"Invalid Ed25519 private key: {e}") from e
        if not isinstance(key, ed25519.Ed25519PrivateKey):
            raise FormatError("Key is not an Ed25519 private key")
        return key

    def dump_private_der(self, private_key: ed25519.Ed25519PrivateKey, pkcs: Pkcs) -> bytes:
        return private_key.private_bytes(
            serialization.Encoding.DER,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )

    def load_public_der(self, der: bytes, pkcs: Pkcs) -> ed25519.Ed25519PublicKey:
        try:
            key = serialization.load_der_public_key(der)
        except (ValueError, UnsupportedAlgorithm) as e:
            raise FormatError(f"Invalid Ed25519 public key: {e}") from e
        if not isinstance(key, ed25519.Ed25519PublicKey):
            raise FormatError("Key is not an Ed25519 public key")
        return key

    def dump_public_der(self, public_key: ed25519.Ed25519PublicKey, pkcs: Pkcs) -> bytes:
        return public_key.public_bytes(
            serialization.Encoding.DER,
            serialization.PublicFormat.SubjectPublicKeyInfo,
        )


def to_x25519_public_key(public_key: ed25519.Ed25519PublicKey) -> x25519.X25519PublicKey:
    """Map an Ed25519 public key to its X25519 u-coordinate.

    Raises:
        FormatError: If the Edwards point cannot be converted.
    """
    raw = public_key.public_bytes(serialization.Encoding.Raw, serialization.PublicFormat.Raw)
    try:
        return x25519.X25519PublicKey.from_public_bytes(crypto_sign_ed25519_pk_to_curve25519(raw))
    except CryptoError as e:
        raise FormatError(f"Ed25519 public key has no X25519 form: {e}") from e


def to_x25519_private_key(private_key: ed25519.Ed25519PrivateKey) -> x25519.X25519PrivateKey:
    """Map an Ed25519 private key to the matching X25519 scalar."""
    seed = private_key.private_bytes(
        serialization.Encoding.Raw,
        serialization.PrivateFormat.Raw,
        serialization.NoEncryption(),
    )
    public = private_key.public_key().public_bytes(
        serialization.Encoding.Raw, serialization.PublicFormat.Raw
    )
    # libsodium expects the 64-byte seed || public form. Its cffi binding only
    # takes and returns bytes, so neither side can live in a wipeable buffer.
    scalar = crypto_sign_ed25519_sk_to_curve25519(seed + public)
    return x25519.X25519PrivateKey.from_private_bytes(scalar)
