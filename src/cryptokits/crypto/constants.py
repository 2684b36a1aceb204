"""Cryptographic constants for cryptokits."""

from ..types import KeyFamily

# AES constants
AES_BLOCK_SIZE = 16
AES_KEY_SIZES = (16, 32)
AES_CBC_IV_SIZE = 16
AES_GCM_NONCE_SIZE = 12
AES_GCM_TAG_SIZE = 16

# PBKDF2 iterations for the standalone KDF call
PBKDF2_ITERATIONS = 600_000

# ECIES shared-secret expansion: PBKDF2 iterations, fallback salt and the
# 44-byte output split into an AES-256 key and a GCM nonce
ECIES_PBKDF2_ITERATIONS = 210_000
ECIES_SALT = "VSPDJrx1Pj1zqVGN"
ECIES_KEY_SIZE = 32
ECIES_KDF_LENGTH = ECIES_KEY_SIZE + AES_GCM_NONCE_SIZE

# Scrypt cost parameters (N, r, p)
SCRYPT_N = 2**17
SCRYPT_R = 8
SCRYPT_P = 1

# Raw X25519 public key size
X25519_PUBLIC_KEY_SIZE = 32

# SM2 named curve, GB/T 32918.5
SM2_OID = "1.2.156.10197.1.301"
SM2_FIELD_SIZE = 32

# Curve sniffing priority
ECC_CURVE_ORDER = (
    KeyFamily.NIST_P256,
    KeyFamily.NIST_P384,
    KeyFamily.NIST_P521,
    KeyFamily.SECP256K1,
    KeyFamily.SM2,
)
