"""Currency codes and issues (currency plus issuing account)."""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
import re
import typing

from ledger_entry.core.exceptions import DescriptorParseError
from ledger_entry.core.types import Failure, Result, Success
from ledger_entry.protocol.accounts import AccountID

NATIVE_CODE = "XRP"
ISO_CHARSET = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789<>(){}[]|?!@#$%^&*"
)
_HEX_160 = re.compile(r"[0-9A-Fa-f]{40}")


@dataclasses.dataclass(frozen=True, slots=True, order=True)
class Currency:
    """A 160-bit currency identifier.

    Three-character codes occupy bytes 12..14; everything else is zero. The
    all-zero value is the native currency.
    """

    value: bytes

    NATIVE: typing.ClassVar[Currency]
    BAD: typing.ClassVar[Currency]
    NONE: typing.ClassVar[Currency]

    def __post_init__(self) -> None:
        if not isinstance(self.value, bytes) or len(self.value) != 20:
            raise ValueError("Currency requires exactly 20 bytes")

    @classmethod
    def from_code(cls, code: str) -> Currency | None:
        """Parse a currency code.

        Accepts the empty string or ``"XRP"`` (native), a three-character code
        drawn from `ISO_CHARSET`, or 40 hex digits. Returns None otherwise.
        """
        if code == "" or code == NATIVE_CODE:
            return cls.NATIVE
        if len(code) == 3 and all(ch in ISO_CHARSET for ch in code):
            return cls(bytes(12) + code.encode("ascii") + bytes(5))
        if _HEX_160.fullmatch(code):
            return cls(bytes.fromhex(code))
        return None

    @property
    def is_native(self) -> bool:
        return not any(self.value)

    def __str__(self) -> str:
        if self.is_native:
            return NATIVE_CODE
        iso = self.value[12:15]
        if (
            self.value[:12] == bytes(12)
            and self.value[15:] == bytes(5)
            and all(chr(b) in ISO_CHARSET for b in iso)
        ):
            return iso.decode("ascii")
        return self.value.hex().upper()


Currency.NATIVE = Currency(bytes(20))
# "XRP" spelled out as a non-native code is reserved and never valid.
Currency.BAD = Currency(bytes(12) + b"XRP" + bytes(5))
Currency.NONE = Currency(bytes(19) + b"\x01")


@dataclasses.dataclass(frozen=True, slots=True, order=True)
class Issue:
    """A currency together with its issuer. Orders by currency, then account."""

    currency: Currency
    account: AccountID

    @property
    def is_native(self) -> bool:
        return self.currency.is_native

    def to_json(self) -> dict[str, str]:
        if self.is_native:
            return {"currency": NATIVE_CODE}
        return {"currency": str(self.currency), "issuer": str(self.account)}


NATIVE_ISSUE = Issue(Currency.NATIVE, AccountID.ZERO)


def parse_issue(value: typing.Any) -> Result[Issue, DescriptorParseError]:
    """Parse an issue descriptor such as ``{"currency": "USD", "issuer": "r..."}``.

    The native currency must not name an issuer; any other currency must.
    Never raises for malformed input.
    """
    if not isinstance(value, Mapping):
        return Failure(DescriptorParseError("issue must be an object"))

    currency_text = value.get("currency")
    if not isinstance(currency_text, str):
        return Failure(DescriptorParseError("issue currency must be a string"))
    currency = Currency.from_code(currency_text)
    if currency is None or currency in (Currency.BAD, Currency.NONE):
        return Failure(DescriptorParseError("issue currency must be a valid currency"))

    issuer_text = value.get("issuer")
    if currency.is_native:
        if issuer_text is not None:
            return Failure(DescriptorParseError("native issue must not have an issuer"))
        return Success(NATIVE_ISSUE)

    if not isinstance(issuer_text, str):
        return Failure(DescriptorParseError("issue issuer must be a string"))
    issuer = AccountID.from_base58(issuer_text)
    if issuer is None:
        return Failure(DescriptorParseError("issue issuer must be a valid account"))
    return Success(Issue(currency, issuer))
