"""Text encoding utilities for cryptokits.

Byte payloads cross the engine boundary as Base64, hex or raw UTF-8 text.
Everything below the boundary works on bytes.
"""

from __future__ import annotations

import base64
import binascii
import os

from ..errors import FormatError, RequestValidationError
from ..types import TextEncoding


def to_base64(data: bytes) -> str:
    """Encode bytes to standard base64.

    Args:
        data: The bytes to encode.

    Returns:
        Standard base64 string with padding.
    """
    return base64.b64encode(data).decode("ascii")


def from_base64(s: str) -> bytes:
    """Decode a standard, padded base64 string to bytes.

    Args:
        s: The base64 string to decode.

    Returns:
        The decoded bytes.

    Raises:
        ValueError: If the string contains non-alphabet characters or bad padding.
    """
    return base64.b64decode(s, validate=True)


def to_hex(data: bytes, uppercase: bool = False) -> str:
    """Encode bytes to hex, lowercase unless ``uppercase`` is set."""
    encoded = data.hex()
    return encoded.upper() if uppercase else encoded


def from_hex(s: str) -> bytes:
    """Decode a hex string (either case) to bytes."""
    return bytes.fromhex(s)


def to_utf8(data: bytes) -> str:
    """Interpret bytes as UTF-8 text.

    Raises:
        UnicodeDecodeError: If the bytes are not valid UTF-8.
    """
    return data.decode("utf-8")


def from_utf8(s: str) -> bytes:
    """Encode text as UTF-8 bytes."""
    return s.encode("utf-8")


_DECODERS = {
    TextEncoding.BASE64: from_base64,
    TextEncoding.HEX: from_hex,
    TextEncoding.UTF8: from_utf8,
}

_ENCODERS = {
    TextEncoding.BASE64: to_base64,
    TextEncoding.HEX: to_hex,
    TextEncoding.UTF8: to_utf8,
}


def decode_text(text: str, encoding: TextEncoding, field: str = "input") -> bytes:
    """Decode a request field into bytes.

    Args:
        text: The encoded field value.
        encoding: How ``text`` is encoded.
        field: Field name used in the error message.

    Returns:
        The decoded bytes.

    Raises:
        RequestValidationError: If ``text`` is not valid in ``encoding``.
    """
    encoding = TextEncoding(encoding)
    try:
        return _DECODERS[encoding](text)
    except (ValueError, binascii.Error) as e:
        raise RequestValidationError(f"Invalid {encoding.value} in {field}: {e}") from e


def encode_text(data: bytes, encoding: TextEncoding, uppercase: bool = False) -> str:
    """Encode bytes for the caller.

    ``uppercase`` selects upper-case hex digits and is ignored otherwise.

    Raises:
        FormatError: If UTF-8 output was requested for bytes that are not UTF-8.
    """
    encoding = TextEncoding(encoding)
    if encoding is TextEncoding.HEX:
        return to_hex(data, uppercase=uppercase)
    try:
        return _ENCODERS[encoding](data)
    except UnicodeDecodeError as e:
        raise FormatError(f"Output is not valid UTF-8: {e}") from e


def random_bytes(size: int) -> bytes:
    """Return ``size`` bytes from the operating system CSPRNG."""
    return os.urandom(size)
