"""RSA encryption and decryption for cryptokits."""

from __future__ import annotations

from cryptography.hazmat.primitives.asymmetric import padding

from ..errors import DecryptionError, RequestValidationError
from ..types import Digest, KeyFamily, KeyFormat, Pkcs, RsaPadding
from .codec import import_private_key, import_public_key
from .kdf import get_hash


def _padding(
    rsa_padding: RsaPadding,
    digest: Digest | None,
    mgf_digest: Digest | None,
) -> padding.AsymmetricPadding:
    if rsa_padding is RsaPadding.PKCS1_V15:
        return padding.PKCS1v15()
    digest = digest or Digest.SHA256
    return padding.OAEP(
        mgf=padding.MGF1(algorithm=get_hash(mgf_digest or digest)),
        algorithm=get_hash(digest),
        label=None,
    )


def rsa_crypto(
    key: bytes,
    pkcs: Pkcs,
    key_format: KeyFormat,
    rsa_padding: RsaPadding,
    data: bytes,
    for_encryption: bool,
    digest: Digest | None = None,
    mgf_digest: Digest | None = None,
) -> bytes:
    """Encrypt with an RSA public key or decrypt with an RSA private key.

    Args:
        key: Public key (SPKI or PKCS1) to encrypt, private key (PKCS8 or PKCS1) to decrypt.
        pkcs: Container of ``key``.
        key_format: Serialization of ``key``.
        rsa_padding: PKCS#1 v1.5 or OAEP.
        data: Plaintext or ciphertext.
        for_encryption: Direction.
        digest: OAEP digest, SHA-256 when None.
        mgf_digest: MGF1 digest, ``digest`` when None.

    Returns:
        The ciphertext or recovered plaintext.

    Raises:
        RequestValidationError: If the plaintext is too long for the key and padding.
        DecryptionError: If the ciphertext does not decrypt under the key.
    """
    scheme = _padding(RsaPadding(rsa_padding), digest, mgf_digest)

    if for_encryption:
        public = import_public_key(key, KeyFamily.RSA, pkcs, key_format)
        try:
            return public.key.encrypt(bytes(data), scheme)
        except ValueError as e:
            raise RequestValidationError(f"RSA encryption failed: {e}") from e

    private = import_private_key(key, KeyFamily.RSA, pkcs, key_format)
    try:
        return private.key.decrypt(bytes(data), scheme)
    except ValueError:
        raise DecryptionError() from None
