"""Account identifiers and their base58 text form."""

from __future__ import annotations

import dataclasses
import hashlib
import typing

# Ledger-specific base58 alphabet ("r" encodes zero).
ALPHABET = "rpshnaf39wBUDNEGHJKLM4PQRST7VWXYZ2bcdeCg65jkm8oFqi1tuvAxyz"
_DIGITS = {ch: i for i, ch in enumerate(ALPHABET)}

_ACCOUNT_ID_VERSION = b"\x00"
_CHECKSUM_SIZE = 4
# Longest text form of a version byte, 20-byte id and checksum
_MAX_ADDRESS_LENGTH = 35


def _checksum(payload: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(payload).digest()).digest()[:_CHECKSUM_SIZE]


def _b58decode(text: str) -> bytes | None:
    num = 0
    for ch in text:
        digit = _DIGITS.get(ch)
        if digit is None:
            return None
        num = num * 58 + digit
    leading = len(text) - len(text.lstrip(ALPHABET[0]))
    body = num.to_bytes((num.bit_length() + 7) // 8, "big") if num else b""
    return b"\x00" * leading + body


def _b58encode(data: bytes) -> str:
    num = int.from_bytes(data, "big")
    chars: list[str] = []
    while num:
        num, rem = divmod(num, 58)
        chars.append(ALPHABET[rem])
    leading = len(data) - len(data.lstrip(b"\x00"))
    return ALPHABET[0] * leading + "".join(reversed(chars))


@dataclasses.dataclass(frozen=True, slots=True, order=True)
class AccountID:
    """A 160-bit account identifier."""

    value: bytes

    ZERO: typing.ClassVar[AccountID]

    def __post_init__(self) -> None:
        if not isinstance(self.value, bytes) or len(self.value) != 20:
            raise ValueError("AccountID requires exactly 20 bytes")

    @classmethod
    def from_base58(cls, text: str) -> AccountID | None:
        """Decode a checksummed base58 address; None if it is not one."""
        if not isinstance(text, str) or not 0 < len(text) <= _MAX_ADDRESS_LENGTH:
            return None
        raw = _b58decode(text)
        if raw is None or len(raw) != 1 + 20 + _CHECKSUM_SIZE:
            return None
        payload, check = raw[:-_CHECKSUM_SIZE], raw[-_CHECKSUM_SIZE:]
        if payload[:1] != _ACCOUNT_ID_VERSION or _checksum(payload) != check:
            return None
        return cls(payload[1:])

    def to_base58(self) -> str:
        payload = _ACCOUNT_ID_VERSION + self.value
        return _b58encode(payload + _checksum(payload))

    @property
    def is_zero(self) -> bool:
        return not any(self.value)

    def __str__(self) -> str:
        return self.to_base58()


AccountID.ZERO = AccountID(bytes(20))
