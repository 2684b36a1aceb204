"""Asymmetric key codec for cryptokits.

Imports keys from PKCS8, PKCS1, SEC1 and SPKI containers in PEM or DER,
exports them back into any container the family supports, and transcodes
between the two. Private and public keys travel in distinct handle types.

Supported containers:
    RSA              private: PKCS8, PKCS1   public: SPKI, PKCS1
    Weierstrass      private: PKCS8, SEC1    public: SPKI, SEC1 point (DER only)
    Curve25519       private: PKCS8          public: SPKI

A public key requested as PKCS8 is read and written as SPKI.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..errors import CryptoKitsError, UnsupportedError
from ..types import KeyFamily, KeyFormat, Pkcs
from .backend import KeyBackend
from .constants import ECC_CURVE_ORDER
from .curves import get_curve
from .edwards import Ed25519Backend
from .pem import check_der, der_to_pem, pem_to_der
from .rsa import RsaBackend

logger = logging.getLogger("cryptokits")

_RSA = RsaBackend()
_ED25519 = Ed25519Backend()


@dataclass(frozen=True)
class PrivateKeyHandle:
    """A decoded private key and its family."""

    family: KeyFamily
    key: Any

    def __repr__(self) -> str:
        return f"PrivateKeyHandle(family={self.family.value})"


@dataclass(frozen=True)
class PublicKeyHandle:
    """A decoded public key and its family."""

    family: KeyFamily
    key: Any


def get_backend(family: KeyFamily) -> KeyBackend:
    """Return the key backend for a family."""
    family = KeyFamily(family)
    if family is KeyFamily.RSA:
        return _RSA
    if family is KeyFamily.CURVE25519:
        return _ED25519
    return get_curve(family)


def _public_pkcs(pkcs: Pkcs) -> Pkcs:
    return Pkcs.SPKI if pkcs is Pkcs.PKCS8 else pkcs


def _to_der(data: bytes, pkcs: Pkcs, key_format: KeyFormat, is_public: bool) -> bytes:
    if key_format is KeyFormat.PEM:
        return pem_to_der(data, pkcs, is_public)
    return bytes(data)


def _from_der(der: bytes, pkcs: Pkcs, key_format: KeyFormat, is_public: bool) -> bytes:
    if key_format is KeyFormat.PEM:
        return der_to_pem(der, pkcs, is_public)
    return der


def _needs_container_check(family: KeyFamily, pkcs: Pkcs, is_public: bool) -> bool:
    # OpenSSL's RSA and EC loaders accept more than one container; Ed25519
    # only exists in PKCS8 / SPKI and a SEC1 public key is a bare point.
    if family is KeyFamily.CURVE25519:
        return False
    return not (is_public and pkcs is Pkcs.SEC1)


def import_private_key(
    data: bytes,
    family: KeyFamily,
    pkcs: Pkcs,
    key_format: KeyFormat,
) -> PrivateKeyHandle:
    """Decode a private key.

    Args:
        data: PEM text (as bytes) or DER.
        family: Expected key family.
        pkcs: Container the key is in.
        key_format: PEM or DER.

    Returns:
        The decoded private key.

    Raises:
        UnsupportedError: If the family has no such private container.
        FormatError: If the bytes are malformed, mislabeled or of another family.
    """
    family, pkcs, key_format = KeyFamily(family), Pkcs(pkcs), KeyFormat(key_format)
    backend = get_backend(family)
    backend.check_container(pkcs, is_public=False)

    der = _to_der(data, pkcs, key_format, is_public=False)
    if _needs_container_check(family, pkcs, is_public=False):
        check_der(der, pkcs, is_public=False)

    logger.debug(
        "import %s private key, pkcs: %s, format: %s", family.value, pkcs.value, key_format.value
    )
    return PrivateKeyHandle(family, backend.load_private_der(der, pkcs))


def import_public_key(
    data: bytes,
    family: KeyFamily,
    pkcs: Pkcs,
    key_format: KeyFormat,
) -> PublicKeyHandle:
    """Decode a public key.

    Raises:
        UnsupportedError: If the family has no such public container, or a
            SEC1 point is requested as PEM.
        FormatError: If the bytes are malformed, mislabeled or of another family.
    """
    family, key_format = KeyFamily(family), KeyFormat(key_format)
    pkcs = _public_pkcs(Pkcs(pkcs))
    backend = get_backend(family)
    backend.check_container(pkcs, is_public=True)

    der = _to_der(data, pkcs, key_format, is_public=True)
    if _needs_container_check(family, pkcs, is_public=True):
        check_der(der, pkcs, is_public=True)

    logger.debug(
        "import %s public key, pkcs: %s, format: %s", family.value, pkcs.value, key_format.value
    )
    return PublicKeyHandle(family, backend.load_public_der(der, pkcs))


def export_private_key(handle: PrivateKeyHandle, pkcs: Pkcs, key_format: KeyFormat) -> bytes:
    """Encode a private key into a container and serialization.

    Raises:
        UnsupportedError: If the family has no such private container.
    """
    pkcs, key_format = Pkcs(pkcs), KeyFormat(key_format)
    backend = get_backend(handle.family)
    backend.check_container(pkcs, is_public=False)
    der = backend.dump_private_der(handle.key, pkcs)
    return _from_der(der, pkcs, key_format, is_public=False)


def export_public_key(handle: PublicKeyHandle, pkcs: Pkcs, key_format: KeyFormat) -> bytes:
    """Encode a public key into a container and serialization.

    Raises:
        UnsupportedError: If the family has no such public container, or a
            SEC1 point is requested as PEM.
    """
    key_format = KeyFormat(key_format)
    pkcs = _public_pkcs(Pkcs(pkcs))
    backend = get_backend(handle.family)
    backend.check_container(pkcs, is_public=True)
    if key_format is KeyFormat.PEM and pkcs is Pkcs.SEC1:
        raise UnsupportedError("sec1 public keys have no PEM form")
    der = backend.dump_public_der(handle.key, pkcs)
    return _from_der(der, pkcs, key_format, is_public=True)


def public_key_of(handle: PrivateKeyHandle) -> PublicKeyHandle:
    """Return the public half of a private key."""
    return PublicKeyHandle(handle.family, get_backend(handle.family).public_key(handle.key))


def transcode(
    data: bytes,
    family: KeyFamily,
    from_pkcs: Pkcs,
    from_format: KeyFormat,
    to_pkcs: Pkcs,
    to_format: KeyFormat,
    is_public: bool,
) -> bytes:
    """Convert a key between containers and serializations.

    Args:
        data: The key as PEM text (bytes) or DER.
        family: Key family.
        from_pkcs: Source container.
        from_format: Source serialization.
        to_pkcs: Target container.
        to_format: Target serialization.
        is_public: Whether ``data`` is a public key.

    Returns:
        The re-encoded key.
    """
    logger.debug(
        "transcode %s %s key, %s/%s -> %s/%s",
        KeyFamily(family).value,
        "public" if is_public else "private",
        Pkcs(from_pkcs).value,
        KeyFormat(from_format).value,
        Pkcs(to_pkcs).value,
        KeyFormat(to_format).value,
    )
    if is_public:
        public = import_public_key(data, family, from_pkcs, from_format)
        return export_public_key(public, to_pkcs, to_format)
    private = import_private_key(data, family, from_pkcs, from_format)
    return export_private_key(private, to_pkcs, to_format)


def sniff_curve(data: bytes, pkcs: Pkcs, key_format: KeyFormat) -> tuple[KeyFamily, bool]:
    """Find the curve of an elliptic curve key.

    Tries every private key importer, then every public key importer, in
    the order NIST P-256, P-384, P-521, secp256k1, SM2, and returns the
    first that accepts the key.

    Returns:
        The curve and whether the key turned out to be public.

    Raises:
        UnsupportedError: If no importer accepts the key.
    """
    for is_public in (False, True):
        importer = import_public_key if is_public else import_private_key
        for family in ECC_CURVE_ORDER:
            try:
                importer(data, family, pkcs, key_format)
            except CryptoKitsError:
                continue
            return family, is_public
    raise UnsupportedError("unsupported key content")
