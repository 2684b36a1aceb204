"""PEM armoring and DER container checks for cryptokits.

PEM input is UTF-8 checked, unarmored and its label compared with the
requested container before the DER payload is used. DER is parsed against
the ASN.1 structure of the requested container so a blob in another
container never reaches a key loader.
"""

from __future__ import annotations

from asn1crypto import keys, pem

from ..errors import FormatError, UnsupportedError
from ..types import Pkcs

# (container, is_public) -> PEM label
PEM_LABELS: dict[tuple[Pkcs, bool], str] = {
    (Pkcs.PKCS8, False): "PRIVATE KEY",
    (Pkcs.SEC1, False): "EC PRIVATE KEY",
    (Pkcs.PKCS1, False): "RSA PRIVATE KEY",
    (Pkcs.PKCS1, True): "RSA PUBLIC KEY",
    (Pkcs.SPKI, True): "PUBLIC KEY",
}

_CONTAINERS: dict[tuple[Pkcs, bool], type] = {
    (Pkcs.PKCS8, False): keys.PrivateKeyInfo,
    (Pkcs.SEC1, False): keys.ECPrivateKey,
    (Pkcs.PKCS1, False): keys.RSAPrivateKey,
    (Pkcs.PKCS1, True): keys.RSAPublicKey,
    (Pkcs.SPKI, True): keys.PublicKeyInfo,
}


def pem_label(pkcs: Pkcs, is_public: bool) -> str:
    """Return the PEM label for a container.

    Raises:
        UnsupportedError: If the container has no PEM form.
    """
    try:
        return PEM_LABELS[(pkcs, is_public)]
    except KeyError:
        kind = "public" if is_public else "private"
        raise UnsupportedError(f"{pkcs.value} {kind} keys have no PEM form") from None


def pem_to_der(data: bytes, pkcs: Pkcs, is_public: bool) -> bytes:
    """Strip PEM armor after checking the label.

    Args:
        data: PEM text as bytes.
        pkcs: The container the caller expects.
        is_public: Whether a public key is expected.

    Returns:
        The DER payload.

    Raises:
        FormatError: If the text is not UTF-8, not PEM, or carries another label.
        UnsupportedError: If the container has no PEM form, or the PEM is encrypted.
    """
    expected = pem_label(pkcs, is_public)

    try:
        data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FormatError(f"PEM key is not valid UTF-8: {e}") from e

    try:
        label, headers, der = pem.unarmor(data.strip())
    except ValueError as e:
        raise FormatError(f"Invalid PEM: {e}") from e

    if label != expected:
        raise FormatError(f"PEM label mismatch: found {label!r}, expected {expected!r}")
    if headers:
        raise UnsupportedError("Encrypted PEM keys are not supported")
    return der


def read_label(data: bytes) -> str:
    """Return the label of a PEM block without checking it.

    Raises:
        FormatError: If the data is not PEM.
    """
    try:
        label, _, _ = pem.unarmor(data.strip())
    except ValueError as e:
        raise FormatError(f"Invalid PEM: {e}") from e
    return label


def der_to_pem(der: bytes, pkcs: Pkcs, is_public: bool) -> bytes:
    """Armor DER as PEM: 64-column base64, LF line endings, trailing newline."""
    return pem.armor(pem_label(pkcs, is_public), der)


def check_der(der: bytes, pkcs: Pkcs, is_public: bool) -> None:
    """Parse DER against the ASN.1 structure of a container.

    Raises:
        FormatError: If the bytes are not a well-formed instance of the container.
        UnsupportedError: If the container does not hold keys of that kind.
    """
    asn1_type = _CONTAINERS.get((pkcs, is_public))
    if asn1_type is None:
        kind = "public" if is_public else "private"
        raise UnsupportedError(f"{pkcs.value} does not hold {kind} keys")

    try:
        # .native walks the whole structure
        asn1_type.load(der, strict=True).native
    except (ValueError, TypeError, KeyError) as e:
        raise FormatError(f"Malformed {pkcs.value} DER: {e}") from e
