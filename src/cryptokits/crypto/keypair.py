"""Key pair generation and public key derivation for cryptokits."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..constants import DEFAULT_RSA_KEY_SIZE
from ..types import KeyFamily, KeyFormat, Pkcs
from .codec import (
    PrivateKeyHandle,
    export_private_key,
    export_public_key,
    get_backend,
    import_private_key,
    public_key_of,
)

logger = logging.getLogger("cryptokits")


@dataclass
class KeyPair:
    """Encoded private and public key.

    Attributes:
        private_key: The private key in the requested container and serialization.
        public_key: The public key, SPKI unless the private key is PKCS1.
    """

    private_key: bytes = field(repr=False)
    public_key: bytes


def public_container(pkcs: Pkcs) -> Pkcs:
    """Public key container that goes with a private key container.

    PKCS1 private keys pair with PKCS1 public keys; everything else pairs
    with SPKI.
    """
    return Pkcs.PKCS1 if Pkcs(pkcs) is Pkcs.PKCS1 else Pkcs.SPKI


def generate_keypair(
    family: KeyFamily,
    pkcs: Pkcs = Pkcs.PKCS8,
    key_format: KeyFormat = KeyFormat.PEM,
    key_size: int | None = None,
) -> KeyPair:
    """Generate a new key pair.

    Args:
        family: Key family. Curve25519 keys are generated as Ed25519.
        pkcs: Private key container.
        key_format: PEM or DER, used for both halves.
        key_size: RSA modulus size in bits (2048, 3072 or 4096).

    Returns:
        The encoded key pair.

    Raises:
        UnsupportedError: If the container or RSA key size is not supported.
    """
    family = KeyFamily(family)
    backend = get_backend(family)
    backend.check_container(Pkcs(pkcs), is_public=False)

    logger.debug("generate %s key pair", family.value)
    if family is KeyFamily.RSA:
        key = backend.generate_private_key(key_size or DEFAULT_RSA_KEY_SIZE)
    else:
        key = backend.generate_private_key()

    private = PrivateKeyHandle(family, key)
    return KeyPair(
        private_key=export_private_key(private, pkcs, key_format),
        public_key=export_public_key(public_key_of(private), public_container(pkcs), key_format),
    )


def derive_public_key(
    private_key: bytes,
    family: KeyFamily,
    pkcs: Pkcs = Pkcs.PKCS8,
    key_format: KeyFormat = KeyFormat.PEM,
) -> bytes:
    """Derive the encoded public key from an encoded private key.

    The public key uses the same serialization as the private key and the
    container given by ``public_container``.
    """
    private = import_private_key(private_key, family, pkcs, key_format)
    return export_public_key(public_key_of(private), public_container(pkcs), key_format)
