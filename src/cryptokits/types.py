"""Type definitions for cryptokits."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class KeyFamily(str, Enum):
    """Asymmetric key families."""

    RSA = "rsa"
    NIST_P256 = "nistp256"
    NIST_P384 = "nistp384"
    NIST_P521 = "nistp521"
    SECP256K1 = "secp256k1"
    SM2 = "sm2"
    CURVE25519 = "curve25519"

    @property
    def is_weierstrass(self) -> bool:
        """Whether the family is one of the short Weierstrass curves."""
        return self not in (KeyFamily.RSA, KeyFamily.CURVE25519)


class Pkcs(str, Enum):
    """ASN.1 key containers."""

    PKCS8 = "pkcs8"
    PKCS1 = "pkcs1"
    SEC1 = "sec1"
    SPKI = "spki"


class KeyFormat(str, Enum):
    """Key serializations."""

    PEM = "pem"
    DER = "der"


class TextEncoding(str, Enum):
    """Text encodings applied to byte payloads at the engine boundary."""

    BASE64 = "base64"
    UTF8 = "utf8"
    HEX = "hex"


class EncryptionMode(str, Enum):
    """AES block cipher modes."""

    ECB = "ECB"
    CBC = "CBC"
    GCM = "GCM"


class AesPadding(str, Enum):
    """AES padding schemes."""

    PKCS7 = "pkcs7"
    NO_PADDING = "nopadding"


class Digest(str, Enum):
    """Digest algorithms accepted by the KDFs and RSA-OAEP."""

    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"
    SHA3_256 = "sha3-256"
    SHA3_384 = "sha3-384"
    SHA3_512 = "sha3-512"


class Kdf(str, Enum):
    """Key derivation functions."""

    HKDF = "hkdf"
    CONCATENATION = "concatenation"
    PBKDF2 = "pbkdf2"
    SCRYPT = "scrypt"


class RsaPadding(str, Enum):
    """RSA encryption paddings."""

    PKCS1_V15 = "pkcs1-v1_5"
    OAEP = "oaep"


class EciesAlgorithm(str, Enum):
    """AEAD ciphers usable inside an ECIES envelope."""

    AES_GCM = "AES-GCM"


@dataclass
class KeyTuple:
    """Text-encoded key pair returned by the engine.

    Attributes:
        private_key: Encoded private key, or None when only a public key is produced.
        public_key: Encoded public key, or None when only a private key is produced.
    """

    private_key: str | None
    public_key: str | None


@dataclass
class PkcsSpec:
    """Container, serialization and text encoding of one side of a transcode.

    Attributes:
        pkcs: ASN.1 container.
        format: PEM or DER.
        encoding: Text encoding of the key string. PEM keys are always UTF-8;
            DER keys default to base64.
    """

    pkcs: Pkcs
    format: KeyFormat
    encoding: TextEncoding | None = None


@dataclass
class EccKeyInfo:
    """What was detected about an elliptic curve key string."""

    curve: KeyFamily
    encoding: TextEncoding
    format: KeyFormat
    pkcs: Pkcs


@dataclass
class RsaKeyInfo:
    """What was detected about an RSA key string."""

    key_size: int
    encoding: TextEncoding
    format: KeyFormat
    pkcs: Pkcs


@dataclass
class AesRequest:
    """AES encryption or decryption request.

    Attributes:
        mode: Block cipher mode.
        padding: Padding scheme. GCM requires NO_PADDING.
        key: Encoded AES key (16 or 32 bytes once decoded).
        input: Encoded plaintext or ciphertext.
        for_encryption: True to encrypt, False to decrypt.
        iv: Encoded IV (CBC) or nonce (GCM). Must be None for ECB.
        aad: Encoded associated data (GCM only).
        key_encoding: Encoding of ``key``.
        input_encoding: Encoding of ``input``.
        iv_encoding: Encoding of ``iv``.
        aad_encoding: Encoding of ``aad``.
        output_encoding: Encoding of the result.
    """

    mode: EncryptionMode
    padding: AesPadding
    key: str
    input: str
    for_encryption: bool
    iv: str | None = None
    aad: str | None = None
    key_encoding: TextEncoding = TextEncoding.BASE64
    input_encoding: TextEncoding = TextEncoding.UTF8
    iv_encoding: TextEncoding = TextEncoding.BASE64
    aad_encoding: TextEncoding = TextEncoding.UTF8
    output_encoding: TextEncoding = TextEncoding.BASE64


@dataclass
class RsaRequest:
    """RSA encryption or decryption request.

    Attributes:
        key: Public key for encryption, private key for decryption.
        pkcs: Container of ``key``.
        format: Serialization of ``key``.
        padding: RSA padding scheme.
        input: Encoded plaintext or ciphertext.
        for_encryption: True to encrypt, False to decrypt.
        digest: OAEP digest. Defaults to SHA-256.
        mgf_digest: MGF1 digest. Defaults to ``digest``.
    """

    key: str
    pkcs: Pkcs
    format: KeyFormat
    padding: RsaPadding
    input: str
    for_encryption: bool
    digest: Digest | None = None
    mgf_digest: Digest | None = None
    key_encoding: TextEncoding = TextEncoding.UTF8
    input_encoding: TextEncoding = TextEncoding.UTF8
    output_encoding: TextEncoding = TextEncoding.BASE64


@dataclass
class EciesRequest:
    """ECIES encryption or decryption request.

    Attributes:
        curve: Curve of ``key``.
        key: Recipient public key for encryption, own private key for decryption.
        pkcs: Container of ``key``.
        format: Serialization of ``key``.
        input: Encoded plaintext or envelope.
        for_encryption: True to encrypt, False to decrypt.
        kdf: KDF applied to the shared secret.
        digest: Digest used by the KDF.
        salt: Encoded KDF salt. None selects the built-in salt.
        info: Encoded KDF info / OtherInfo.
        aad: Encoded associated data bound into the AEAD tag.
    """

    curve: KeyFamily
    key: str
    pkcs: Pkcs
    format: KeyFormat
    input: str
    for_encryption: bool
    kdf: Kdf = Kdf.PBKDF2
    digest: Digest = Digest.SHA512
    algorithm: EciesAlgorithm = EciesAlgorithm.AES_GCM
    salt: str | None = None
    info: str | None = None
    aad: str | None = None
    key_encoding: TextEncoding = TextEncoding.UTF8
    input_encoding: TextEncoding = TextEncoding.UTF8
    salt_encoding: TextEncoding = TextEncoding.UTF8
    info_encoding: TextEncoding = TextEncoding.UTF8
    aad_encoding: TextEncoding = TextEncoding.UTF8
    output_encoding: TextEncoding = TextEncoding.BASE64


@dataclass
class KdfRequest:
    """Standalone key derivation request."""

    kdf: Kdf
    digest: Digest
    input: str
    length: int
    salt: str | None = None
    info: str | None = None
    input_encoding: TextEncoding = TextEncoding.UTF8
    salt_encoding: TextEncoding = TextEncoding.UTF8
    info_encoding: TextEncoding = TextEncoding.UTF8
    output_encoding: TextEncoding = TextEncoding.BASE64
