"""Default values for cryptokits."""

from .types import KeyFamily, KeyFormat, Pkcs, TextEncoding

# RSA key sizes in bits
DEFAULT_RSA_KEY_SIZE = 2048
RSA_KEY_SIZES = (2048, 3072, 4096)

# AES key sizes in bits accepted by generate_aes
AES_KEY_BITS = (128, 256)

# Defaults for generated and transcoded keys
DEFAULT_PKCS = Pkcs.PKCS8
DEFAULT_KEY_FORMAT = KeyFormat.PEM
DEFAULT_DER_ENCODING = TextEncoding.BASE64

# Families listed by the enumeration helpers
ELLIPTIC_CURVES = (
    KeyFamily.NIST_P256,
    KeyFamily.NIST_P384,
    KeyFamily.NIST_P521,
    KeyFamily.SECP256K1,
    KeyFamily.SM2,
)
EDWARDS_CURVES = (KeyFamily.CURVE25519,)
