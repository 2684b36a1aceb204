"""Request validation for the symmetric cipher and KDF layers.

Checks run before any cipher or KDF object is constructed, in order, and
raise on the first violation.
"""

from __future__ import annotations

from ..errors import RequestValidationError, UnsupportedError
from ..types import AesPadding, EncryptionMode, Kdf
from .constants import (
    AES_BLOCK_SIZE,
    AES_CBC_IV_SIZE,
    AES_GCM_NONCE_SIZE,
    AES_KEY_SIZES,
)

_IV_SIZES = {
    EncryptionMode.CBC: AES_CBC_IV_SIZE,
    EncryptionMode.GCM: AES_GCM_NONCE_SIZE,
}


def validate_aes_request(
    mode: EncryptionMode,
    padding: AesPadding,
    key: bytes,
    data: bytes,
    for_encryption: bool,
    iv: bytes | None = None,
    aad: bytes | None = None,
) -> None:
    """Validate an AES request.

    Validation steps:
    1. Key length - 16 or 32 bytes
    2. IV - absent for ECB, 16 bytes for CBC, 12 bytes for GCM
    3. Padding - GCM only runs without padding
    4. AAD - only GCM authenticates associated data
    5. Block alignment - unpadded ECB/CBC input must be whole blocks

    Raises:
        UnsupportedError: If the key length selects no AES variant.
        RequestValidationError: If any other parameter does not fit the mode.
    """
    # Step 1: Key length selects the variant
    if len(key) not in AES_KEY_SIZES:
        raise UnsupportedError(
            f"Unsupported AES key length: {len(key)} bytes, expected one of {AES_KEY_SIZES}"
        )

    # Step 2: IV presence and length
    _validate_iv(mode, iv)

    # Step 3: Padding
    if mode is EncryptionMode.GCM and padding is not AesPadding.NO_PADDING:
        raise RequestValidationError("GCM mode requires nopadding")

    # Step 4: AAD
    if aad is not None and mode is not EncryptionMode.GCM:
        raise RequestValidationError(f"{mode.value} mode does not accept associated data")

    # Step 5: Block alignment without padding. Decryption input with PKCS7 is
    # checked by the cipher itself and fails as a decryption error.
    if mode is not EncryptionMode.GCM and padding is AesPadding.NO_PADDING:
        if len(data) % AES_BLOCK_SIZE != 0:
            direction = "plaintext" if for_encryption else "ciphertext"
            raise RequestValidationError(
                f"nopadding {direction} length {len(data)} is not a multiple of {AES_BLOCK_SIZE}"
            )


def _validate_iv(mode: EncryptionMode, iv: bytes | None) -> None:
    """Validate IV presence and length for the mode."""
    expected = _IV_SIZES.get(mode)
    if expected is None:
        if iv is not None:
            raise RequestValidationError(f"{mode.value} mode does not take an IV")
        return

    if iv is None:
        raise RequestValidationError(f"{mode.value} mode requires an IV")
    if len(iv) != expected:
        raise RequestValidationError(
            f"Invalid {mode.value} IV size: {len(iv)} bytes, expected {expected}"
        )


def validate_kdf_request(
    kdf: Kdf,
    length: int,
    salt: bytes | None,
    max_length: int | None = None,
) -> None:
    """Validate a KDF request.

    Args:
        kdf: The KDF to run.
        length: Requested output length in bytes.
        salt: Salt, required by PBKDF2 and Scrypt.
        max_length: Largest output the KDF can produce, if bounded.

    Raises:
        RequestValidationError: If the length or salt cannot be honored.
    """
    if length < 1:
        raise RequestValidationError(f"Invalid output length: {length}, expected at least 1")

    if max_length is not None and length > max_length:
        raise RequestValidationError(
            f"{kdf.value} cannot derive {length} bytes, maximum is {max_length}"
        )

    if kdf in (Kdf.PBKDF2, Kdf.SCRYPT) and not salt:
        raise RequestValidationError(f"{kdf.value} requires a salt")
