"""RSA key backend for cryptokits."""

from __future__ import annotations

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from ..constants import DEFAULT_RSA_KEY_SIZE, RSA_KEY_SIZES
from ..errors import FormatError, UnsupportedError
from ..types import KeyFamily, Pkcs
from .backend import KeyBackend

_PRIVATE_FORMATS = {
    Pkcs.PKCS8: serialization.PrivateFormat.PKCS8,
    Pkcs.PKCS1: serialization.PrivateFormat.TraditionalOpenSSL,
}

_PUBLIC_FORMATS = {
    Pkcs.SPKI: serialization.PublicFormat.SubjectPublicKeyInfo,
    Pkcs.PKCS1: serialization.PublicFormat.PKCS1,
}


class RsaBackend(KeyBackend):
    """RSA keys in PKCS8 / PKCS1 (private) and SPKI / PKCS1 (public)."""

    family = KeyFamily.RSA
    private_containers = (Pkcs.PKCS8, Pkcs.PKCS1)
    public_containers = (Pkcs.SPKI, Pkcs.PKCS1)

    def generate_private_key(self, key_size: int = DEFAULT_RSA_KEY_SIZE) -> rsa.RSAPrivateKey:
        if key_size not in RSA_KEY_SIZES:
            raise UnsupportedError(
                f"Unsupported RSA key size: {key_size}, expected one of {RSA_KEY_SIZES}"
            )
        return rsa.generate_private_key(public_exponent=65537, key_size=key_size)

    def public_key(self, private_key: rsa.RSAPrivateKey) -> rsa.RSAPublicKey:
        return private_key.public_key()

    def load_private_der(self, der: bytes, pkcs: Pkcs) -> rsa.RSAPrivateKey:
        try:
            key = serialization.load_der_private_key(der, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise FormatError(f"Invalid RSA private key: {e}") from e
        if not isinstance(key, rsa.RSAPrivateKey):
            raise FormatError("Key is not an RSA private key")
        return key

    def dump_private_der(self, private_key: rsa.RSAPrivateKey, pkcs: Pkcs) -> bytes:
        return private_key.private_bytes(
            serialization.Encoding.DER,
            _PRIVATE_FORMATS[pkcs],
            serialization.NoEncryption(),
        )

    def load_public_der(self, der: bytes, pkcs: Pkcs) -> rsa.RSAPublicKey:
        try:
            key = serialization.load_der_public_key(der)
        except (ValueError, UnsupportedAlgorithm) as e:
            raise FormatError(f"Invalid RSA public key: {e}") from e
        if not isinstance(key, rsa.RSAPublicKey):
            raise FormatError("Key is not an RSA public key")
        return key

    def dump_public_der(self, public_key: rsa.RSAPublicKey, pkcs: Pkcs) -> bytes:
        return public_key.public_bytes(serialization.Encoding.DER, _PUBLIC_FORMATS[pkcs])
