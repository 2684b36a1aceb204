"""Zeroing buffer for secret material held by cryptokits."""

from __future__ import annotations

from types import TracebackType


class SecretBytes:
    """Mutable buffer that is overwritten with zeros when released.

    Wraps private scalars, ECDH shared secrets and derived key material.
    Use it as a context manager so the end of the ``with`` block wipes the
    buffer; ``__del__`` wipes whatever is left behind.

    Copies made with ``bytes(...)`` are outside this guard. Pass ``data`` or
    ``view()`` to APIs that accept buffers instead.
    """

    __slots__ = ("_buf",)

    def __init__(self, data: bytes | bytearray | memoryview = b"") -> None:
        self._buf = bytearray(data)

    @property
    def data(self) -> bytearray:
        """The guarded buffer itself."""
        return self._buf

    def view(self, start: int = 0, stop: int | None = None) -> memoryview:
        """Return a zero-copy view over part of the buffer."""
        return memoryview(self._buf)[start:stop]

    def wipe(self) -> None:
        """Overwrite the buffer with zeros in place."""
        size = len(self._buf)
        if size:
            self._buf[:] = bytes(size)

    def __len__(self) -> int:
        return len(self._buf)

    def __enter__(self) -> SecretBytes:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.wipe()

    def __del__(self) -> None:
        # __init__ may have failed before the slot was set
        if getattr(self, "_buf", None) is not None:
            self.wipe()

    def __repr__(self) -> str:
        return f"SecretBytes(<{len(self._buf)} bytes>)"
