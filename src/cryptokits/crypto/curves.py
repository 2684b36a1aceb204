"""Short Weierstrass curves for cryptokits.

Every curve exposes the same capability set: key generation, public
derivation, ECDH, SEC1 point encoding and PKCS8 / SEC1 / SPKI DER. NIST
P-256/384/521 and secp256k1 run on OpenSSL through ``cryptography``. SM2
uses ``gmssl`` for point arithmetic and ``asn1crypto`` for its containers.
"""

from __future__ import annotations

import secrets
from abc import abstractmethod
from dataclasses import dataclass
from typing import Any

from asn1crypto import keys
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from gmssl import sm2

from ..errors import FormatError, UnsupportedError
from ..types import KeyFamily, Pkcs
from .backend import KeyBackend
from .constants import SM2_FIELD_SIZE, SM2_OID
from .secret import SecretBytes

keys.NamedCurve.register("sm2", SM2_OID, SM2_FIELD_SIZE)


class EllipticCurve(KeyBackend):
    """Capability set shared by all Weierstrass curves.

    Attributes:
        field_size: Size of a field element in bytes.
    """

    field_size: int
    private_containers = (Pkcs.PKCS8, Pkcs.SEC1)
    public_containers = (Pkcs.SPKI, Pkcs.SEC1)

    def encoded_point_size(self, compressed: bool = True) -> int:
        """Length of a SEC1 encoded point."""
        return 1 + self.field_size if compressed else 1 + 2 * self.field_size

    @abstractmethod
    def exchange(self, private_key: Any, public_key: Any) -> SecretBytes:
        """ECDH: the x-coordinate of ``private * public``."""

    @abstractmethod
    def encode_point(self, public_key: Any, compressed: bool = True) -> bytes:
        """Encode a public key as a SEC1 point."""

    @abstractmethod
    def decode_point(self, data: bytes) -> Any:
        """Decode a compressed or uncompressed SEC1 point, checking it is on the curve."""


class OpenSSLCurve(EllipticCurve):
    """A named curve served by OpenSSL."""

    def __init__(self, family: KeyFamily, curve: ec.EllipticCurve, field_size: int) -> None:
        self.family = family
        self.field_size = field_size
        self._curve = curve

    def _check_curve(self, key: Any, kind: str) -> None:
        if kind == "private":
            expected_type: type = ec.EllipticCurvePrivateKey
        else:
            expected_type = ec.EllipticCurvePublicKey
        if not isinstance(key, expected_type):
            raise FormatError(f"Key is not an EC {kind} key")
        if key.curve.name != self._curve.name:
            raise FormatError(
                f"Key is on curve {key.curve.name}, expected {self._curve.name}"
            )

    def generate_private_key(self) -> ec.EllipticCurvePrivateKey:
        return ec.generate_private_key(self._curve)

    def public_key(self, private_key: ec.EllipticCurvePrivateKey) -> ec.EllipticCurvePublicKey:
        return private_key.public_key()

    def exchange(
        self,
        private_key: ec.EllipticCurvePrivateKey,
        public_key: ec.EllipticCurvePublicKey,
    ) -> SecretBytes:
        return SecretBytes(private_key.exchange(ec.ECDH(), public_key))

    def encode_point(self, public_key: ec.EllipticCurvePublicKey, compressed: bool = True) -> bytes:
        point_format = (
            serialization.PublicFormat.CompressedPoint
            if compressed
            else serialization.PublicFormat.UncompressedPoint
        )
        return public_key.public_bytes(serialization.Encoding.X962, point_format)

    def decode_point(self, data: bytes) -> ec.EllipticCurvePublicKey:
        try:
            return ec.EllipticCurvePublicKey.from_encoded_point(self._curve, bytes(data))
        except ValueError as e:
            raise FormatError(f"Invalid {self._curve.name} point: {e}") from e

    def load_private_der(self, der: bytes, pkcs: Pkcs) -> ec.EllipticCurvePrivateKey:
        try:
            key = serialization.load_der_private_key(der, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise FormatError(f"Invalid {self._curve.name} private key: {e}") from e
        self._check_curve(key, "private")
        return key

    def dump_private_der(self, private_key: ec.EllipticCurvePrivateKey, pkcs: Pkcs) -> bytes:
        private_format = (
            serialization.PrivateFormat.PKCS8
            if pkcs is Pkcs.PKCS8
            else serialization.PrivateFormat.TraditionalOpenSSL
        )
        return private_key.private_bytes(
            serialization.Encoding.DER, private_format, serialization.NoEncryption()
        )

    def load_public_der(self, der: bytes, pkcs: Pkcs) -> ec.EllipticCurvePublicKey:
        if pkcs is Pkcs.SEC1:
            return self.decode_point(der)
        try:
            key = serialization.load_der_public_key(der)
        except (ValueError, UnsupportedAlgorithm) as e:
            raise FormatError(f"Invalid {self._curve.name} public key: {e}") from e
        self._check_curve(key, "public")
        return key

    def dump_public_der(self, public_key: ec.EllipticCurvePublicKey, pkcs: Pkcs) -> bytes:
        if pkcs is Pkcs.SEC1:
            return self.encode_point(public_key, compressed=False)
        return public_key.public_bytes(
            serialization.Encoding.DER,
            serialization.PublicFormat.SubjectPublicKeyInfo,
        )


@dataclass(frozen=True)
class Sm2PublicKey:
    """Affine SM2 point."""

    x: int
    y: int


class Sm2PrivateKey:
    """SM2 private scalar and its public point.

    The scalar is held in a SecretBytes buffer that is wiped when the key is
    garbage collected.
    """

    __slots__ = ("_scalar", "public_key")

    def __init__(self, scalar: int, public_key: Sm2PublicKey) -> None:
        self._scalar = SecretBytes(scalar.to_bytes(SM2_FIELD_SIZE, "big"))
        self.public_key = public_key

    @property
    def private_value(self) -> int:
        return int.from_bytes(self._scalar.data, "big")


class Sm2Curve(EllipticCurve):
    """SM2 (GB/T 32918) with gmssl point multiplication."""

    family = KeyFamily.SM2
    field_size = SM2_FIELD_SIZE

    def __init__(self) -> None:
        self._sm2 = sm2.CryptSM2(private_key=None, public_key="None")
        table = self._sm2.ecc_table
        self._p = int(table["p"], 16)
        self._a = int(table["a"], 16)
        self._b = int(table["b"], 16)
        self._n = int(table["n"], 16)
        g = table["g"]
        self._generator = Sm2PublicKey(int(g[:64], 16), int(g[64:], 16))

    def _multiply(self, k: int, point: Sm2PublicKey) -> Sm2PublicKey:
        # _kg takes and returns x || y as fixed-width hex
        result = self._sm2._kg(k, f"{point.x:064x}{point.y:064x}")
        return Sm2PublicKey(int(result[:64], 16), int(result[64:], 16))

    def _is_on_curve(self, x: int, y: int) -> bool:
        p = self._p
        if not (0 <= x < p and 0 <= y < p):
            return False
        return (y * y - (x * x * x + self._a * x + self._b)) % p == 0

    def _private_key(self, scalar: int) -> Sm2PrivateKey:
        if not 1 <= scalar < self._n:
            raise FormatError("SM2 private scalar is out of range")
        return Sm2PrivateKey(scalar, self._multiply(scalar, self._generator))

    def _check_parameters(self, params: Any) -> None:
        if (
            not isinstance(params, keys.ECDomainParameters)
            or params.name != "named"
            or params.chosen.dotted != SM2_OID
        ):
            raise FormatError("Key is not on the SM2 curve")

    def generate_private_key(self) -> Sm2PrivateKey:
        return self._private_key(secrets.randbelow(self._n - 1) + 1)

    def public_key(self, private_key: Sm2PrivateKey) -> Sm2PublicKey:
        return private_key.public_key

    def exchange(self, private_key: Sm2PrivateKey, public_key: Sm2PublicKey) -> SecretBytes:
        shared = self._multiply(private_key.private_value, public_key)
        return SecretBytes(shared.x.to_bytes(self.field_size, "big"))

    def encode_point(self, public_key: Sm2PublicKey, compressed: bool = True) -> bytes:
        x = public_key.x.to_bytes(self.field_size, "big")
        if compressed:
            return bytes([2 + (public_key.y & 1)]) + x
        return b"\x04" + x + public_key.y.to_bytes(self.field_size, "big")

    def decode_point(self, data: bytes) -> Sm2PublicKey:
        data = bytes(data)
        size = self.field_size
        p = self._p

        if len(data) == 1 + size and data[0] in (2, 3):
            x = int.from_bytes(data[1:], "big")
            if x >= p:
                raise FormatError("SM2 point is not on the curve")
            rhs = (x * x * x + self._a * x + self._b) % p
            # p = 3 mod 4, so a square root is rhs^((p + 1) / 4)
            y = pow(rhs, (p + 1) // 4, p)
            if y * y % p != rhs:
                raise FormatError("SM2 point is not on the curve")
            if (y & 1) != (data[0] & 1):
                y = (p - y) % p
        elif len(data) == 1 + 2 * size and data[0] == 4:
            x = int.from_bytes(data[1 : 1 + size], "big")
            y = int.from_bytes(data[1 + size :], "big")
            if not self._is_on_curve(x, y):
                raise FormatError("SM2 point is not on the curve")
        else:
            raise FormatError(f"Invalid SM2 point encoding of {len(data)} bytes")
        return Sm2PublicKey(x, y)

    def load_private_der(self, der: bytes, pkcs: Pkcs) -> Sm2PrivateKey:
        try:
            if pkcs is Pkcs.PKCS8:
                info = keys.PrivateKeyInfo.load(der, strict=True)
                algorithm = info["private_key_algorithm"]
                if algorithm["algorithm"].native != "ec":
                    raise FormatError("Key is not an EC private key")
                params = algorithm["parameters"]
                ec_key = info["private_key"].parsed
            else:
                ec_key = keys.ECPrivateKey.load(der, strict=True)
                params = ec_key["parameters"]
            self._check_parameters(params)
            scalar = ec_key["private_key"].native
        except (ValueError, TypeError, KeyError) as e:
            raise FormatError(f"Invalid SM2 private key: {e}") from e
        return self._private_key(scalar)

    def dump_private_der(self, private_key: Sm2PrivateKey, pkcs: Pkcs) -> bytes:
        ec_key = keys.ECPrivateKey(
            {
                "version": "ecPrivkeyVer1",
                "private_key": private_key.private_value,
                "parameters": keys.ECDomainParameters(name="named", value="sm2"),
                "public_key": keys.ECPointBitString(
                    self.encode_point(private_key.public_key, compressed=False)
                ),
            }
        )
        ec_key.set_key_size(self.field_size)
        if pkcs is Pkcs.PKCS8:
            return keys.PrivateKeyInfo.wrap(ec_key, "ec").dump()
        return ec_key.dump()

    def load_public_der(self, der: bytes, pkcs: Pkcs) -> Sm2PublicKey:
        if pkcs is Pkcs.SEC1:
            return self.decode_point(der)
        try:
            info = keys.PublicKeyInfo.load(der, strict=True)
            algorithm = info["algorithm"]
            if algorithm["algorithm"].native != "ec":
                raise FormatError("Key is not an EC public key")
            self._check_parameters(algorithm["parameters"])
            point = info["public_key"].native
        except (ValueError, TypeError, KeyError) as e:
            raise FormatError(f"Invalid SM2 public key: {e}") from e
        return self.decode_point(point)

    def dump_public_der(self, public_key: Sm2PublicKey, pkcs: Pkcs) -> bytes:
        point = self.encode_point(public_key, compressed=False)
        if pkcs is Pkcs.SEC1:
            return point
        info = keys.PublicKeyInfo(
            {
                "algorithm": keys.PublicKeyAlgorithm(
                    {
                        "algorithm": "ec",
                        "parameters": keys.ECDomainParameters(name="named", value="sm2"),
                    }
                ),
                "public_key": point,
            }
        )
        return info.dump()


_CURVES: dict[KeyFamily, EllipticCurve] = {
    KeyFamily.NIST_P256: OpenSSLCurve(KeyFamily.NIST_P256, ec.SECP256R1(), 32),
    KeyFamily.NIST_P384: OpenSSLCurve(KeyFamily.NIST_P384, ec.SECP384R1(), 48),
    KeyFamily.NIST_P521: OpenSSLCurve(KeyFamily.NIST_P521, ec.SECP521R1(), 66),
    KeyFamily.SECP256K1: OpenSSLCurve(KeyFamily.SECP256K1, ec.SECP256K1(), 32),
    KeyFamily.SM2: Sm2Curve(),
}


def get_curve(family: KeyFamily) -> EllipticCurve:
    """Return the curve implementation for a family.

    Raises:
        UnsupportedError: If the family is not a Weierstrass curve.
    """
    try:
        return _CURVES[KeyFamily(family)]
    except (KeyError, ValueError):
        raise UnsupportedError(f"Unsupported curve: {family}") from None
