"""cryptokits.

Key generation and conversion, AES, RSA, ECIES and key derivation behind a
text-in / text-out interface.

Example:
    ```python
    from cryptokits import (
        EciesRequest, KeyFamily, KeyFormat, Pkcs, TextEncoding, ecies, generate_ecc,
    )

    keys = generate_ecc(KeyFamily.NIST_P256)

    envelope = ecies(EciesRequest(
        curve=KeyFamily.NIST_P256,
        key=keys.public_key,
        pkcs=Pkcs.SPKI,
        format=KeyFormat.PEM,
        input="hello",
        for_encryption=True,
    ))

    plaintext = ecies(EciesRequest(
        curve=KeyFamily.NIST_P256,
        key=keys.private_key,
        pkcs=Pkcs.PKCS8,
        format=KeyFormat.PEM,
        input=envelope,
        for_encryption=False,
        input_encoding=TextEncoding.BASE64,
        output_encoding=TextEncoding.UTF8,
    ))
    ```
"""

from .constants import (
    DEFAULT_DER_ENCODING,
    DEFAULT_KEY_FORMAT,
    DEFAULT_PKCS,
    DEFAULT_RSA_KEY_SIZE,
    RSA_KEY_SIZES,
)
from .engine import (
    aes_crypto,
    aes_key_sizes,
    convert_encoding,
    derive_ecc,
    derive_edwards,
    derive_rsa,
    digests,
    ecies,
    ecies_algorithms,
    edwards_curves,
    elliptic_curves,
    generate_aes,
    generate_ecc,
    generate_edwards,
    generate_iv,
    generate_rsa,
    kdf,
    kdfs,
    parse_ecc,
    parse_rsa,
    rsa_crypto,
    rsa_key_sizes,
    rsa_paddings,
    transfer_ecc_key,
    transfer_edwards_key,
    transfer_rsa_key,
)
from .errors import (
    CryptoKitsError,
    DecryptionError,
    FormatError,
    RequestValidationError,
    UnsupportedError,
)
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

__version__ = "0.1.0"

__all__ = [
    # Engine
    "aes_crypto",
    "aes_key_sizes",
    "convert_encoding",
    "derive_ecc",
    "derive_edwards",
    "derive_rsa",
    "digests",
    "ecies",
    "ecies_algorithms",
    "edwards_curves",
    "elliptic_curves",
    "generate_aes",
    "generate_ecc",
    "generate_edwards",
    "generate_iv",
    "generate_rsa",
    "kdf",
    "kdfs",
    "parse_ecc",
    "parse_rsa",
    "rsa_crypto",
    "rsa_key_sizes",
    "rsa_paddings",
    "transfer_ecc_key",
    "transfer_edwards_key",
    "transfer_rsa_key",
    # Constants
    "DEFAULT_DER_ENCODING",
    "DEFAULT_KEY_FORMAT",
    "DEFAULT_PKCS",
    "DEFAULT_RSA_KEY_SIZE",
    "RSA_KEY_SIZES",
    # Errors
    "CryptoKitsError",
    "DecryptionError",
    "FormatError",
    "RequestValidationError",
    "UnsupportedError",
    # Types
    "AesPadding",
    "AesRequest",
    "Digest",
    "EccKeyInfo",
    "EciesAlgorithm",
    "EciesRequest",
    "EncryptionMode",
    "Kdf",
    "KdfRequest",
    "KeyFamily",
    "KeyFormat",
    "KeyTuple",
    "Pkcs",
    "PkcsSpec",
    "RsaKeyInfo",
    "RsaPadding",
    "RsaRequest",
    "TextEncoding",
]
