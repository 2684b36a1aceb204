"""ECIES hybrid encryption for cryptokits.

Envelope layout:

    length (1 byte) || ephemeral public key (length bytes) || AES-256-GCM ciphertext + tag

The ephemeral key is a compressed SEC1 point on the recipient's curve, or a
raw 32-byte X25519 key for Curve25519. The ECDH shared secret is expanded
by the selected KDF into 44 bytes: bytes [0:32] are the AES key and bytes
[32:44] are the GCM nonce. A fresh ephemeral key per message keeps the
derived nonce unique.

Only the x-coordinate of the shared point enters the KDF, and P and -P share
it. Flipping the 02/03 prefix of a compressed ephemeral point therefore
yields an envelope that still decrypts to the same plaintext. Envelopes are
not canonical: compare plaintexts, never envelope bytes.

The derived key and nonce are written into a buffer that is zeroed before
returning. The ECDH output arrives from the backends as immutable bytes and
only its guarded copy is wiped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import x25519

from ..errors import FormatError, UnsupportedError
from ..types import (
    AesPadding,
    Digest,
    EciesAlgorithm,
    EncryptionMode,
    Kdf,
    KeyFamily,
    KeyFormat,
    Pkcs,
)
from .aes import aes_crypto
from .codec import PrivateKeyHandle, PublicKeyHandle, import_private_key, import_public_key
from .constants import (
    ECIES_KDF_LENGTH,
    ECIES_KEY_SIZE,
    ECIES_PBKDF2_ITERATIONS,
    ECIES_SALT,
    X25519_PUBLIC_KEY_SIZE,
)
from .curves import get_curve
from .edwards import to_x25519_private_key, to_x25519_public_key
from .kdf import derive_key_into
from .secret import SecretBytes

logger = logging.getLogger("cryptokits")


@dataclass(frozen=True)
class EciesParams:
    """KDF and AEAD parameters shared by both directions.

    Attributes:
        kdf: KDF applied to the shared secret.
        digest: Digest used by the KDF.
        salt: KDF salt. None selects the built-in ECIES salt.
        info: KDF info / OtherInfo. None means empty.
        aad: Associated data for AES-GCM. None means empty.
        algorithm: AEAD cipher.
    """

    kdf: Kdf = Kdf.PBKDF2
    digest: Digest = Digest.SHA512
    salt: bytes | None = None
    info: bytes | None = None
    aad: bytes | None = None
    algorithm: EciesAlgorithm = EciesAlgorithm.AES_GCM


def ephemeral_key_size(family: KeyFamily) -> int:
    """Length of the ephemeral public key carried in the envelope."""
    family = KeyFamily(family)
    if family is KeyFamily.CURVE25519:
        return X25519_PUBLIC_KEY_SIZE
    return get_curve(family).encoded_point_size(compressed=True)


def _check_family(family: KeyFamily) -> KeyFamily:
    family = KeyFamily(family)
    if family is KeyFamily.RSA:
        raise UnsupportedError("ECIES is not defined for RSA keys")
    return family


def _encapsulate(public: PublicKeyHandle) -> tuple[bytes, SecretBytes]:
    """Generate an ephemeral key and agree on a secret with the recipient."""
    if public.family is KeyFamily.CURVE25519:
        recipient = to_x25519_public_key(public.key)
        ephemeral = x25519.X25519PrivateKey.generate()
        encoded = ephemeral.public_key().public_bytes(
            serialization.Encoding.Raw, serialization.PublicFormat.Raw
        )
        return encoded, _x25519_exchange(ephemeral, recipient)

    curve = get_curve(public.family)
    ephemeral = curve.generate_private_key()
    encoded = curve.encode_point(curve.public_key(ephemeral), compressed=True)
    return encoded, curve.exchange(ephemeral, public.key)


def _decapsulate(private: PrivateKeyHandle, encoded: bytes) -> SecretBytes:
    """Agree on the secret from our private key and the sender's ephemeral key."""
    if private.family is KeyFamily.CURVE25519:
        own = to_x25519_private_key(private.key)
        ephemeral = x25519.X25519PublicKey.from_public_bytes(encoded)
        return _x25519_exchange(own, ephemeral)

    curve = get_curve(private.family)
    return curve.exchange(private.key, curve.decode_point(encoded))


def _x25519_exchange(
    private_key: x25519.X25519PrivateKey, public_key: x25519.X25519PublicKey
) -> SecretBytes:
    try:
        return SecretBytes(private_key.exchange(public_key))
    except ValueError as e:
        # All-zero output from a low order point
        raise FormatError(f"Invalid X25519 public key: {e}") from e


def _seal(
    shared: SecretBytes,
    data: bytes,
    params: EciesParams,
    for_encryption: bool,
) -> bytes:
    """Derive the AES key and nonce from the shared secret and run AES-GCM."""
    salt = params.salt if params.salt is not None else ECIES_SALT.encode("utf-8")
    with shared, SecretBytes(bytes(ECIES_KDF_LENGTH)) as okm:
        derive_key_into(
            params.kdf,
            params.digest,
            shared.data,
            okm.data,
            salt=salt,
            info=params.info,
            iterations=ECIES_PBKDF2_ITERATIONS,
        )
        return aes_crypto(
            EncryptionMode.GCM,
            AesPadding.NO_PADDING,
            okm.view(0, ECIES_KEY_SIZE),
            data,
            for_encryption,
            iv=okm.view(ECIES_KEY_SIZE, ECIES_KDF_LENGTH),
            aad=params.aad,
        )


def encrypt(plaintext: bytes, public: PublicKeyHandle, params: EciesParams | None = None) -> bytes:
    """Encrypt to a recipient public key.

    Args:
        plaintext: The message. May be empty.
        public: The recipient's public key.
        params: KDF and AEAD parameters.

    Returns:
        The ECIES envelope.
    """
    params = params or EciesParams()
    _check_family(public.family)
    encoded, shared = _encapsulate(public)
    ciphertext = _seal(shared, plaintext, params, for_encryption=True)
    return bytes([len(encoded)]) + encoded + ciphertext


def split_envelope(envelope: bytes, family: KeyFamily) -> tuple[bytes, bytes]:
    """Split an envelope into the ephemeral public key and the ciphertext.

    Raises:
        FormatError: If the length prefix overruns the buffer or does not
            match the curve's ephemeral key size.
    """
    if not envelope:
        raise FormatError("ECIES envelope is empty")

    size = envelope[0]
    if 1 + size > len(envelope):
        raise FormatError(
            f"ECIES ephemeral key length {size} exceeds envelope of {len(envelope)} bytes"
        )
    expected = ephemeral_key_size(family)
    if size != expected:
        raise FormatError(
            f"ECIES ephemeral key length {size} does not match {family.value} ({expected})"
        )
    return envelope[1 : 1 + size], envelope[1 + size :]


def decrypt(envelope: bytes, private: PrivateKeyHandle, params: EciesParams | None = None) -> bytes:
    """Decrypt an envelope with our private key.

    Raises:
        FormatError: If the envelope or its ephemeral key is malformed.
        DecryptionError: If authentication fails, for any reason.
    """
    params = params or EciesParams()
    family = _check_family(private.family)
    encoded, ciphertext = split_envelope(envelope, family)
    shared = _decapsulate(private, encoded)
    return _seal(shared, ciphertext, params, for_encryption=False)


def ecies_crypto(
    payload: bytes,
    key: bytes,
    family: KeyFamily,
    pkcs: Pkcs,
    key_format: KeyFormat,
    for_encryption: bool,
    *,
    kdf: Kdf = Kdf.PBKDF2,
    digest: Digest = Digest.SHA512,
    salt: bytes | None = None,
    info: bytes | None = None,
    aad: bytes | None = None,
    algorithm: EciesAlgorithm = EciesAlgorithm.AES_GCM,
) -> bytes:
    """Encrypt to an encoded public key or decrypt with an encoded private key.

    Args:
        payload: Plaintext to encrypt, or envelope to decrypt.
        key: Recipient public key (encrypt) or own private key (decrypt).
        family: Curve of ``key``.
        pkcs: Container of ``key``.
        key_format: Serialization of ``key``.
        for_encryption: Direction.
        kdf: KDF applied to the shared secret.
        digest: Digest used by the KDF.
        salt: KDF salt. None selects the built-in ECIES salt.
        info: KDF info / OtherInfo.
        aad: Associated data bound into the GCM tag.
        algorithm: AEAD cipher.

    Returns:
        The envelope or the recovered plaintext.

    Raises:
        UnsupportedError: If the curve, container or AEAD is not supported.
        FormatError: If the key or envelope is malformed.
        RequestValidationError: If the KDF parameters cannot be honored.
        DecryptionError: If authentication fails.
    """
    family = _check_family(family)
    try:
        algorithm = EciesAlgorithm(algorithm)
    except ValueError:
        raise UnsupportedError(f"Unsupported ECIES algorithm: {algorithm}") from None
    params = EciesParams(
        kdf=Kdf(kdf),
        digest=Digest(digest),
        salt=salt,
        info=info,
        aad=aad,
        algorithm=algorithm,
    )

    logger.debug(
        "ecies %s, curve: %s, kdf: %s, digest: %s",
        "encrypt" if for_encryption else "decrypt",
        family.value,
        params.kdf.value,
        params.digest.value,
    )
    if for_encryption:
        return encrypt(payload, import_public_key(key, family, pkcs, key_format), params)
    # Reject a malformed envelope before touching the private key
    split_envelope(payload, family)
    return decrypt(payload, import_private_key(key, family, pkcs, key_format), params)
