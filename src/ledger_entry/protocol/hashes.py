"""Fixed-size 256-bit identifiers and the hash that produces them."""

from __future__ import annotations

import dataclasses
import hashlib
import re
import typing

_HEX_256 = re.compile(r"[0-9A-Fa-f]{64}")


def sha512_half(*parts: bytes) -> bytes:
    """Return the first 32 bytes of SHA-512 over the concatenated parts."""
    h = hashlib.sha512()
    for part in parts:
        h.update(part)
    return h.digest()[:32]


@dataclasses.dataclass(frozen=True, slots=True, order=True)
class Hash256:
    """A 256-bit ledger key. The all-zero value means "not computed"."""

    value: bytes

    ZERO: typing.ClassVar[Hash256]

    def __post_init__(self) -> None:
        if not isinstance(self.value, bytes) or len(self.value) != 32:
            raise ValueError("Hash256 requires exactly 32 bytes")

    @classmethod
    def from_hex(cls, text: str) -> Hash256 | None:
        """Parse exactly 64 hex digits; anything else yields None."""
        if not isinstance(text, str) or _HEX_256.fullmatch(text) is None:
            return None
        return cls(bytes.fromhex(text))

    @classmethod
    def from_bytes(cls, data: bytes) -> Hash256 | None:
        """Wrap raw bytes when they have the exact width, else None."""
        if not isinstance(data, bytes | bytearray) or len(data) != 32:
            return None
        return cls(bytes(data))

    @property
    def is_zero(self) -> bool:
        return not any(self.value)

    def __str__(self) -> str:
        return self.value.hex().upper()


Hash256.ZERO = Hash256(bytes(32))
