"""AES encryption and decryption for cryptokits."""

from __future__ import annotations

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import padding as sym_padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..errors import DecryptionError, RequestValidationError
from ..types import AesPadding, EncryptionMode
from .constants import AES_BLOCK_SIZE, AES_CBC_IV_SIZE, AES_GCM_NONCE_SIZE
from .utils import random_bytes
from .validation import validate_aes_request

Buffer = bytes | bytearray | memoryview


def aes_crypto(
    mode: EncryptionMode,
    padding: AesPadding,
    key: Buffer,
    data: Buffer,
    for_encryption: bool,
    iv: Buffer | None = None,
    aad: Buffer | None = None,
) -> bytes:
    """Encrypt or decrypt with AES.

    ECB and CBC run through a block cipher with PKCS#7 or no padding. GCM
    appends its 16-byte tag to the ciphertext and expects it there on
    decryption.

    Args:
        mode: ECB, CBC or GCM.
        padding: PKCS7 or NO_PADDING. GCM requires NO_PADDING.
        key: 16-byte (AES-128) or 32-byte (AES-256) key.
        data: Plaintext or ciphertext.
        for_encryption: True to encrypt, False to decrypt.
        iv: 16-byte IV for CBC, 12-byte nonce for GCM, None for ECB.
        aad: Associated data for GCM.

    Returns:
        The ciphertext or recovered plaintext.

    Raises:
        UnsupportedError: If the key length selects no AES variant.
        RequestValidationError: If IV, padding or input length do not fit the mode.
        DecryptionError: If the tag does not verify or the padding is invalid.
    """
    mode = EncryptionMode(mode)
    padding = AesPadding(padding)
    validate_aes_request(mode, padding, key, data, for_encryption, iv, aad)

    if mode is EncryptionMode.GCM:
        return _gcm(key, data, for_encryption, iv, aad)
    return _block(mode, padding, key, data, for_encryption, iv)


def _gcm(
    key: Buffer,
    data: Buffer,
    for_encryption: bool,
    nonce: Buffer,
    aad: Buffer | None,
) -> bytes:
    aesgcm = AESGCM(key)
    if for_encryption:
        return aesgcm.encrypt(nonce, data, aad)
    try:
        return aesgcm.decrypt(nonce, data, aad)
    except InvalidTag:
        raise DecryptionError() from None


def _block(
    mode: EncryptionMode,
    padding: AesPadding,
    key: Buffer,
    data: Buffer,
    for_encryption: bool,
    iv: Buffer | None,
) -> bytes:
    cipher_mode = modes.CBC(iv) if mode is EncryptionMode.CBC else modes.ECB()
    cipher = Cipher(algorithms.AES(key), cipher_mode)
    pkcs7 = padding is AesPadding.PKCS7

    if for_encryption:
        if pkcs7:
            padder = sym_padding.PKCS7(AES_BLOCK_SIZE * 8).padder()
            data = padder.update(data) + padder.finalize()
        encryptor = cipher.encryptor()
        return encryptor.update(data) + encryptor.finalize()

    try:
        decryptor = cipher.decryptor()
        plaintext = decryptor.update(data) + decryptor.finalize()
        if pkcs7:
            unpadder = sym_padding.PKCS7(AES_BLOCK_SIZE * 8).unpadder()
            plaintext = unpadder.update(plaintext) + unpadder.finalize()
    except ValueError:
        # Partial final block or invalid padding bytes
        raise DecryptionError() from None
    return plaintext


def generate_aes_key(bits: int = 256) -> bytes:
    """Generate a random AES key.

    Args:
        bits: 128 or 256.

    Raises:
        RequestValidationError: If ``bits`` is not 128 or 256.
    """
    if bits not in (128, 256):
        raise RequestValidationError(f"Invalid AES key size: {bits} bits, expected 128 or 256")
    return AESGCM.generate_key(bits)


def generate_iv(mode: EncryptionMode) -> bytes | None:
    """Generate a random IV (CBC) or nonce (GCM). ECB takes none."""
    mode = EncryptionMode(mode)
    if mode is EncryptionMode.CBC:
        return random_bytes(AES_CBC_IV_SIZE)
    if mode is EncryptionMode.GCM:
        return random_bytes(AES_GCM_NONCE_SIZE)
    return None
