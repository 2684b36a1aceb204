"""Cryptographic operations for cryptokits."""

from .aes import aes_crypto, generate_aes_key, generate_iv
from .codec import (
    PrivateKeyHandle,
    PublicKeyHandle,
    export_private_key,
    export_public_key,
    import_private_key,
    import_public_key,
    public_key_of,
    sniff_curve,
    transcode,
)
from .constants import ECIES_PBKDF2_ITERATIONS, ECIES_SALT, PBKDF2_ITERATIONS
from .curves import EllipticCurve, get_curve
from .ecies import EciesParams, ecies_crypto
from .kdf import derive_key, derive_key_into, get_hash
from .keypair import KeyPair, derive_public_key, generate_keypair
from .rsa_cipher import rsa_crypto
from .secret import SecretBytes
from .utils import decode_text, encode_text, from_base64, from_hex, to_base64, to_hex

__all__ = [
    "ECIES_PBKDF2_ITERATIONS",
    "ECIES_SALT",
    "PBKDF2_ITERATIONS",
    "EciesParams",
    "EllipticCurve",
    "KeyPair",
    "PrivateKeyHandle",
    "PublicKeyHandle",
    "SecretBytes",
    "aes_crypto",
    "decode_text",
    "derive_key",
    "derive_key_into",
    "derive_public_key",
    "ecies_crypto",
    "encode_text",
    "export_private_key",
    "export_public_key",
    "from_base64",
    "from_hex",
    "generate_aes_key",
    "generate_iv",
    "generate_keypair",
    "get_curve",
    "get_hash",
    "import_private_key",
    "import_public_key",
    "public_key_of",
    "rsa_crypto",
    "sniff_curve",
    "to_base64",
    "to_hex",
    "transcode",
]
