"""Per-family key backend interface for cryptokits."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..errors import UnsupportedError
from ..types import KeyFamily, Pkcs


class KeyBackend(ABC):
    """Loads, dumps and generates keys of one family as DER.

    Private and public keys are the backend's own objects; the codec wraps
    them in typed handles.

    Attributes:
        family: The key family served.
        private_containers: Containers accepted for private keys.
        public_containers: Containers accepted for public keys.
    """

    family: KeyFamily
    private_containers: tuple[Pkcs, ...] = ()
    public_containers: tuple[Pkcs, ...] = ()

    def check_container(self, pkcs: Pkcs, is_public: bool) -> None:
        """Raise UnsupportedError if the family has no such container."""
        allowed = self.public_containers if is_public else self.private_containers
        if pkcs not in allowed:
            kind = "public" if is_public else "private"
            raise UnsupportedError(
                f"{pkcs.value} is not a {kind} key container for {self.family.value}"
            )

    @abstractmethod
    def generate_private_key(self) -> Any:
        """Generate a fresh private key."""

    @abstractmethod
    def public_key(self, private_key: Any) -> Any:
        """Return the public half of a private key."""

    @abstractmethod
    def load_private_der(self, der: bytes, pkcs: Pkcs) -> Any:
        """Load a private key from DER in the given container."""

    @abstractmethod
    def dump_private_der(self, private_key: Any, pkcs: Pkcs) -> bytes:
        """Serialize a private key to DER in the given container."""

    @abstractmethod
    def load_public_der(self, der: bytes, pkcs: Pkcs) -> Any:
        """Load a public key from DER in the given container."""

    @abstractmethod
    def dump_public_der(self, public_key: Any, pkcs: Pkcs) -> bytes:
        """Serialize a public key to DER in the given container."""
