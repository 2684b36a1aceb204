"""Text-in / text-out entry points for cryptokits.

Every byte payload crosses this boundary with an explicit text encoding.
PEM keys are always UTF-8 text; DER keys, ciphertexts, salts and derived
keys use the Base64, hex or UTF-8 encoding the caller selects. Everything
below this module works on bytes.
"""

from __future__ import annotations

import logging

from .constants import (
    AES_KEY_BITS,
    DEFAULT_DER_ENCODING,
    DEFAULT_KEY_FORMAT,
    DEFAULT_PKCS,
    DEFAULT_RSA_KEY_SIZE,
    EDWARDS_CURVES,
    ELLIPTIC_CURVES,
    RSA_KEY_SIZES,
)
from .crypto.aes import aes_crypto as aes_cipher
from .crypto.aes import generate_aes_key
from .crypto.aes import generate_iv as generate_cipher_iv
from .crypto.codec import import_private_key, import_public_key, sniff_curve, transcode
from .crypto.ecies import ecies_crypto as ecies_cipher
from .crypto.kdf import derive_key
from .crypto.keypair import derive_public_key, generate_keypair
from .crypto.pem import read_label
from .crypto.rsa_cipher import rsa_crypto as rsa_cipher
from .crypto.utils import decode_text, encode_text
from .errors import CryptoKitsError, RequestValidationError, UnsupportedError
from .types import (
    AesPadding,
    AesRequest,
    Digest,
    EccKeyInfo,
    EciesAlgorithm,
    EciesRequest,
    EncryptionMode,
    Kdf,
    KdfRequest,
    KeyFamily,
    KeyFormat,
    KeyTuple,
    Pkcs,
    PkcsSpec,
    RsaKeyInfo,
    RsaPadding,
    RsaRequest,
    TextEncoding,
)

logger = logging.getLogger("cryptokits")

# PEM label -> (container, is_public)
_ECC_LABELS = {
    "PRIVATE KEY": (Pkcs.PKCS8, False),
    "EC PRIVATE KEY": (Pkcs.SEC1, False),
    "PUBLIC KEY": (Pkcs.SPKI, True),
}
_RSA_LABELS = {
    "PRIVATE KEY": (Pkcs.PKCS8, False),
    "RSA PRIVATE KEY": (Pkcs.PKCS1, False),
    "PUBLIC KEY": (Pkcs.SPKI, True),
    "RSA PUBLIC KEY": (Pkcs.PKCS1, True),
}


# Key text helpers


def _key_encoding(key_format: KeyFormat, encoding: TextEncoding | None) -> TextEncoding:
    if KeyFormat(key_format) is KeyFormat.PEM:
        return TextEncoding.UTF8
    return TextEncoding(encoding) if encoding is not None else DEFAULT_DER_ENCODING


def _decode_key(text: str, key_format: KeyFormat, encoding: TextEncoding | None) -> bytes:
    return decode_text(text, _key_encoding(key_format, encoding), "key")


def _encode_key(data: bytes, key_format: KeyFormat, encoding: TextEncoding | None) -> str:
    return encode_text(data, _key_encoding(key_format, encoding))


def _decode_optional(text: str | None, encoding: TextEncoding, field: str) -> bytes | None:
    if text is None:
        return None
    return decode_text(text, encoding, field)


def _detect_key(text: str) -> tuple[bytes, TextEncoding, KeyFormat]:
    """Work out the text encoding and serialization of a key string."""
    text = text.strip()
    if text.startswith("-----BEGIN "):
        return text.encode("utf-8"), TextEncoding.UTF8, KeyFormat.PEM
    for encoding in (TextEncoding.HEX, TextEncoding.BASE64):
        try:
            return decode_text(text, encoding, "key"), encoding, KeyFormat.DER
        except RequestValidationError:
            continue
    raise UnsupportedError("unsupported key content")


# Key lifecycle


def generate_rsa(
    key_size: int = DEFAULT_RSA_KEY_SIZE,
    pkcs: Pkcs = DEFAULT_PKCS,
    key_format: KeyFormat = DEFAULT_KEY_FORMAT,
    encoding: TextEncoding | None = None,
) -> KeyTuple:
    """Generate an RSA key pair.

    Args:
        key_size: Modulus size in bits (2048, 3072 or 4096).
        pkcs: Private key container (PKCS8 or PKCS1).
        key_format: PEM or DER.
        encoding: Text encoding for DER keys. Base64 when None.

    Returns:
        Encoded private and public key. The public key is PKCS1 when the
        private key is, SPKI otherwise.
    """
    logger.info("generate rsa key, size: %s, pkcs: %s", key_size, Pkcs(pkcs).value)
    pair = generate_keypair(KeyFamily.RSA, pkcs, key_format, key_size)
    return KeyTuple(
        private_key=_encode_key(pair.private_key, key_format, encoding),
        public_key=_encode_key(pair.public_key, key_format, encoding),
    )


def generate_ecc(
    curve: KeyFamily = KeyFamily.NIST_P256,
    pkcs: Pkcs = DEFAULT_PKCS,
    key_format: KeyFormat = DEFAULT_KEY_FORMAT,
    encoding: TextEncoding | None = None,
) -> KeyTuple:
    """Generate a key pair on a Weierstrass curve (PKCS8 or SEC1 private key)."""
    curve = KeyFamily(curve)
    if not curve.is_weierstrass:
        raise UnsupportedError(f"Not an elliptic curve: {curve.value}")
    logger.info("generate ecc key, curve: %s, pkcs: %s", curve.value, Pkcs(pkcs).value)
    pair = generate_keypair(curve, pkcs, key_format)
    return KeyTuple(
        private_key=_encode_key(pair.private_key, key_format, encoding),
        public_key=_encode_key(pair.public_key, key_format, encoding),
    )


def generate_edwards(
    pkcs: Pkcs = DEFAULT_PKCS,
    key_format: KeyFormat = DEFAULT_KEY_FORMAT,
    encoding: TextEncoding | None = None,
) -> KeyTuple:
    """Generate a Curve25519 (Ed25519) key pair."""
    logger.info("generate edwards key, pkcs: %s", Pkcs(pkcs).value)
    pair = generate_keypair(KeyFamily.CURVE25519, pkcs, key_format)
    return KeyTuple(
        private_key=_encode_key(pair.private_key, key_format, encoding),
        public_key=_encode_key(pair.public_key, key_format, encoding),
    )


def _derive(
    family: KeyFamily,
    key: str,
    pkcs: Pkcs,
    key_format: KeyFormat,
    encoding: TextEncoding | None,
) -> str:
    private = _decode_key(key, key_format, encoding)
    public = derive_public_key(private, family, pkcs, key_format)
    return _encode_key(public, key_format, encoding)


def derive_rsa(
    key: str,
    pkcs: Pkcs = DEFAULT_PKCS,
    key_format: KeyFormat = DEFAULT_KEY_FORMAT,
    encoding: TextEncoding | None = None,
) -> str:
    """Derive the RSA public key from a private key, in the same serialization."""
    logger.info("derive rsa public key, pkcs: %s", Pkcs(pkcs).value)
    return _derive(KeyFamily.RSA, key, pkcs, key_format, encoding)


def derive_ecc(
    key: str,
    curve: KeyFamily,
    pkcs: Pkcs = DEFAULT_PKCS,
    key_format: KeyFormat = DEFAULT_KEY_FORMAT,
    encoding: TextEncoding | None = None,
) -> str:
    """Derive the SPKI public key from an elliptic curve private key."""
    curve = KeyFamily(curve)
    if not curve.is_weierstrass:
        raise UnsupportedError(f"Not an elliptic curve: {curve.value}")
    logger.info("derive ecc public key, curve: %s", curve.value)
    return _derive(curve, key, pkcs, key_format, encoding)


def derive_edwards(
    key: str,
    pkcs: Pkcs = DEFAULT_PKCS,
    key_format: KeyFormat = DEFAULT_KEY_FORMAT,
    encoding: TextEncoding | None = None,
) -> str:
    """Derive the SPKI public key from a Curve25519 private key."""
    logger.info("derive edwards public key")
    return _derive(KeyFamily.CURVE25519, key, pkcs, key_format, encoding)


def _transfer(
    family: KeyFamily,
    key: str,
    source: PkcsSpec,
    target: PkcsSpec,
    is_public: bool,
) -> str:
    data = _decode_key(key, source.format, source.encoding)
    output = transcode(
        data,
        family,
        source.pkcs,
        source.format,
        target.pkcs,
        target.format,
        is_public,
    )
    return _encode_key(output, target.format, target.encoding)


def transfer_rsa_key(key: str, source: PkcsSpec, target: PkcsSpec, is_public: bool) -> str:
    """Convert an RSA key between containers, serializations and encodings."""
    logger.info("transfer rsa key, %s -> %s", Pkcs(source.pkcs).value, Pkcs(target.pkcs).value)
    return _transfer(KeyFamily.RSA, key, source, target, is_public)


def transfer_ecc_key(
    curve: KeyFamily,
    key: str,
    source: PkcsSpec,
    target: PkcsSpec,
    is_public: bool,
) -> str:
    """Convert an elliptic curve key between containers, serializations and encodings."""
    curve = KeyFamily(curve)
    if not curve.is_weierstrass:
        raise UnsupportedError(f"Not an elliptic curve: {curve.value}")
    logger.info(
        "transfer ecc key, curve: %s, %s -> %s",
        curve.value,
        Pkcs(source.pkcs).value,
        Pkcs(target.pkcs).value,
    )
    return _transfer(curve, key, source, target, is_public)


def transfer_edwards_key(key: str, source: PkcsSpec, target: PkcsSpec, is_public: bool) -> str:
    """Convert a Curve25519 key between serializations and encodings."""
    logger.info("transfer edwards key")
    return _transfer(KeyFamily.CURVE25519, key, source, target, is_public)


def parse_ecc(key: str) -> EccKeyInfo:
    """Detect the encoding, serialization, container and curve of a key string.

    Raises:
        UnsupportedError: If the key is not an elliptic curve key we can read.
    """
    logger.info("parse ecc key, length: %d", len(key))
    data, encoding, key_format = _detect_key(key)

    if key_format is KeyFormat.PEM:
        label = read_label(data)
        if label not in _ECC_LABELS:
            raise UnsupportedError(f"unsupported PEM label: {label}")
        candidates = [_ECC_LABELS[label][0]]
    else:
        candidates = [Pkcs.PKCS8, Pkcs.SEC1, Pkcs.SPKI]

    for pkcs in candidates:
        try:
            curve, is_public = sniff_curve(data, pkcs, key_format)
        except UnsupportedError:
            continue
        if is_public and pkcs is Pkcs.PKCS8:
            pkcs = Pkcs.SPKI
        return EccKeyInfo(curve=curve, encoding=encoding, format=key_format, pkcs=pkcs)
    raise UnsupportedError("unsupported key content")


def parse_rsa(key: str) -> RsaKeyInfo:
    """Detect the encoding, serialization, container and size of an RSA key string.

    Raises:
        UnsupportedError: If the key is not an RSA key we can read.
    """
    logger.info("parse rsa key, length: %d", len(key))
    data, encoding, key_format = _detect_key(key)

    if key_format is KeyFormat.PEM:
        label = read_label(data)
        if label not in _RSA_LABELS:
            raise UnsupportedError(f"unsupported PEM label: {label}")
        candidates = [_RSA_LABELS[label]]
    else:
        candidates = [
            (Pkcs.PKCS8, False),
            (Pkcs.PKCS1, False),
            (Pkcs.SPKI, True),
            (Pkcs.PKCS1, True),
        ]

    for pkcs, is_public in candidates:
        importer = import_public_key if is_public else import_private_key
        try:
            handle = importer(data, KeyFamily.RSA, pkcs, key_format)
        except CryptoKitsError:
            continue
        return RsaKeyInfo(
            key_size=handle.key.key_size,
            encoding=encoding,
            format=key_format,
            pkcs=pkcs,
        )
    raise UnsupportedError("unsupported key content")


# Symmetric


def aes_crypto(request: AesRequest) -> str:
    """Run an AES request and return the encoded output."""
    logger.info(
        "aes %s, mode: %s, padding: %s",
        "encrypt" if request.for_encryption else "decrypt",
        EncryptionMode(request.mode).value,
        AesPadding(request.padding).value,
    )
    output = aes_cipher(
        request.mode,
        request.padding,
        decode_text(request.key, request.key_encoding, "key"),
        decode_text(request.input, request.input_encoding, "input"),
        request.for_encryption,
        iv=_decode_optional(request.iv, request.iv_encoding, "iv"),
        aad=_decode_optional(request.aad, request.aad_encoding, "aad"),
    )
    return encode_text(output, request.output_encoding)


def generate_aes(key_size: int = 256, encoding: TextEncoding = TextEncoding.BASE64) -> str:
    """Generate a random AES key of 128 or 256 bits."""
    logger.info("generate aes key, size: %s", key_size)
    return encode_text(generate_aes_key(key_size), encoding)


def generate_iv(
    mode: EncryptionMode = EncryptionMode.GCM,
    encoding: TextEncoding = TextEncoding.BASE64,
) -> str | None:
    """Generate a random IV for CBC or nonce for GCM. ECB returns None."""
    iv = generate_cipher_iv(mode)
    return encode_text(iv, encoding) if iv is not None else None


# Asymmetric / hybrid


def rsa_crypto(request: RsaRequest) -> str:
    """Run an RSA request and return the encoded output."""
    logger.info(
        "rsa %s, padding: %s",
        "encrypt" if request.for_encryption else "decrypt",
        RsaPadding(request.padding).value,
    )
    output = rsa_cipher(
        _decode_key(request.key, request.format, request.key_encoding),
        request.pkcs,
        request.format,
        request.padding,
        decode_text(request.input, request.input_encoding, "input"),
        request.for_encryption,
        digest=request.digest,
        mgf_digest=request.mgf_digest,
    )
    return encode_text(output, request.output_encoding)


def ecies(request: EciesRequest) -> str:
    """Run an ECIES request and return the encoded output."""
    logger.info(
        "ecies %s, curve: %s, kdf: %s",
        "encrypt" if request.for_encryption else "decrypt",
        KeyFamily(request.curve).value,
        Kdf(request.kdf).value,
    )
    output = ecies_cipher(
        decode_text(request.input, request.input_encoding, "input"),
        _decode_key(request.key, request.format, request.key_encoding),
        request.curve,
        request.pkcs,
        request.format,
        request.for_encryption,
        kdf=request.kdf,
        digest=request.digest,
        salt=_decode_optional(request.salt, request.salt_encoding, "salt"),
        info=_decode_optional(request.info, request.info_encoding, "info"),
        aad=_decode_optional(request.aad, request.aad_encoding, "aad"),
        algorithm=request.algorithm,
    )
    return encode_text(output, request.output_encoding)


# Key derivation


def kdf(request: KdfRequest) -> str:
    """Derive a key and return it encoded."""
    logger.info(
        "kdf %s, digest: %s, length: %d",
        Kdf(request.kdf).value,
        Digest(request.digest).value,
        request.length,
    )
    output = derive_key(
        request.kdf,
        request.digest,
        decode_text(request.input, request.input_encoding, "input"),
        request.length,
        salt=_decode_optional(request.salt, request.salt_encoding, "salt"),
        info=_decode_optional(request.info, request.info_encoding, "info"),
    )
    return encode_text(output, request.output_encoding)


# Codec and listings


def convert_encoding(
    text: str, source: TextEncoding, target: TextEncoding, uppercase: bool = False
) -> str:
    """Re-encode text, e.g. Base64 to hex. Hex input may use either case."""
    return encode_text(decode_text(text, source), target, uppercase=uppercase)


def elliptic_curves() -> list[str]:
    return [curve.value for curve in ELLIPTIC_CURVES]


def edwards_curves() -> list[str]:
    return [curve.value for curve in EDWARDS_CURVES]


def kdfs() -> list[str]:
    return [item.value for item in Kdf]


def digests() -> list[str]:
    return [item.value for item in Digest]


def ecies_algorithms() -> list[str]:
    return [item.value for item in EciesAlgorithm]


def rsa_key_sizes() -> list[int]:
    return list(RSA_KEY_SIZES)


def rsa_paddings() -> list[str]:
    return [item.value for item in RsaPadding]


def aes_key_sizes() -> list[int]:
    return list(AES_KEY_BITS)
