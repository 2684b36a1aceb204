"""Error hierarchy for cryptokits."""

from __future__ import annotations


class CryptoKitsError(Exception):
    """Base exception for all cryptokits errors."""

    pass


class RequestValidationError(CryptoKitsError):
    """Request parameters are inconsistent with the selected algorithm.

    Raised for wrong key, IV or nonce lengths, a missing salt, a padding
    scheme the mode cannot use, or an output length the KDF cannot produce.
    """

    pass


class FormatError(CryptoKitsError):
    """Key material or ciphertext is not in the expected encoding.

    Covers malformed PEM or DER, a PEM label that does not match the requested
    container, invalid UTF-8, a key of another family, and malformed ECIES
    envelopes.
    """

    pass


class UnsupportedError(CryptoKitsError):
    """Algorithm, container or curve combination is not implemented."""

    pass


class DecryptionError(CryptoKitsError):
    """Cryptographic decryption failure.

    The message never says whether the key was wrong or the ciphertext was
    modified.
    """

    def __init__(self, message: str = "decryption failed") -> None:
        super().__init__(message)
