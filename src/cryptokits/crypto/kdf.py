"""Key derivation for cryptokits.

One entry point, ``derive_key``, covers HKDF, the single-step
Concatenation KDF, PBKDF2 and Scrypt over any supported digest.
"""

from __future__ import annotations

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.concatkdf import ConcatKDFHash
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from ..errors import RequestValidationError, UnsupportedError
from ..types import Digest, Kdf
from .constants import PBKDF2_ITERATIONS, SCRYPT_N, SCRYPT_P, SCRYPT_R
from .validation import validate_kdf_request

_HASHES: dict[Digest, type[hashes.HashAlgorithm]] = {
    Digest.SHA1: hashes.SHA1,
    Digest.SHA256: hashes.SHA256,
    Digest.SHA384: hashes.SHA384,
    Digest.SHA512: hashes.SHA512,
    Digest.SHA3_256: hashes.SHA3_256,
    Digest.SHA3_384: hashes.SHA3_384,
    Digest.SHA3_512: hashes.SHA3_512,
}


def get_hash(digest: Digest) -> hashes.HashAlgorithm:
    """Return a fresh hash algorithm instance for a digest selector.

    Raises:
        UnsupportedError: If the digest is not one of the supported ones.
    """
    try:
        return _HASHES[Digest(digest)]()
    except (KeyError, ValueError) as e:
        raise UnsupportedError(f"Unsupported digest: {digest}") from e


def _deriver(
    kdf: Kdf,
    digest: Digest,
    length: int,
    salt: bytes | None,
    info: bytes | None,
    iterations: int,
) -> tuple[Kdf, HKDF | ConcatKDFHash | PBKDF2HMAC | Scrypt]:
    """Validate a request and build the single-use KDF object for it."""
    try:
        kdf = Kdf(kdf)
    except ValueError as e:
        raise UnsupportedError(f"Unsupported KDF: {kdf}") from e
    algorithm = get_hash(digest)
    salt = bytes(salt) if salt is not None else None
    info = bytes(info) if info is not None else None

    if kdf is Kdf.HKDF:
        validate_kdf_request(kdf, length, salt, max_length=255 * algorithm.digest_size)
        return kdf, HKDF(algorithm=algorithm, length=length, salt=salt, info=info or b"")
    if kdf is Kdf.CONCATENATION:
        validate_kdf_request(kdf, length, salt)
        return kdf, ConcatKDFHash(algorithm=algorithm, length=length, otherinfo=info or b"")
    if kdf is Kdf.PBKDF2:
        validate_kdf_request(kdf, length, salt)
        return kdf, PBKDF2HMAC(
            algorithm=algorithm,
            length=length,
            salt=salt,
            iterations=iterations,
        )
    # Kdf.SCRYPT
    validate_kdf_request(kdf, length, salt)
    return kdf, Scrypt(salt=salt, length=length, n=SCRYPT_N, r=SCRYPT_R, p=SCRYPT_P)


def derive_key(
    kdf: Kdf,
    digest: Digest,
    ikm: bytes | bytearray | memoryview,
    length: int,
    salt: bytes | None = None,
    info: bytes | None = None,
    *,
    iterations: int = PBKDF2_ITERATIONS,
) -> bytes:
    """Derive ``length`` bytes from input key material.

    HKDF and Concatenation KDF treat a missing salt or info as empty.
    Concatenation KDF has no salt input and uses ``info`` as OtherInfo.
    PBKDF2 and Scrypt need a salt. Scrypt ignores ``digest``.

    Args:
        kdf: The KDF to run.
        digest: The underlying digest.
        ikm: Input key material (shared secret or password).
        length: Output length in bytes.
        salt: Optional salt.
        info: Optional context / OtherInfo.
        iterations: PBKDF2 iteration count.

    Returns:
        Exactly ``length`` derived bytes.

    Raises:
        RequestValidationError: If the request cannot be satisfied.
        UnsupportedError: If the KDF or digest is unknown.
    """
    kdf, deriver = _deriver(kdf, digest, length, salt, info, iterations)
    try:
        return deriver.derive(ikm)
    except ValueError as e:
        raise RequestValidationError(f"{kdf.value} derivation failed: {e}") from e


def derive_key_into(
    kdf: Kdf,
    digest: Digest,
    ikm: bytes | bytearray | memoryview,
    out: bytearray,
    salt: bytes | None = None,
    info: bytes | None = None,
    *,
    iterations: int = PBKDF2_ITERATIONS,
) -> None:
    """Derive ``len(out)`` bytes straight into a caller-owned buffer.

    Same rules as ``derive_key``. No immutable copy of the output is made,
    so the caller can wipe ``out`` once it is done with the key.
    """
    kdf, deriver = _deriver(kdf, digest, len(out), salt, info, iterations)
    try:
        deriver.derive_into(ikm, out)
    except ValueError as e:
        raise RequestValidationError(f"{kdf.value} derivation failed: {e}") from e
