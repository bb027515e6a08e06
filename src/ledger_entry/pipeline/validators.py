"""Per-variant validation and key derivation.

Each validator reads the value of its selecting field, checks the shape and
semantics of every field the variant needs, and on success derives the key
through `ledger_entry.protocol.keylets`. Validators return `Success(key)` or
`Failure(EntryLookupError)` and never raise for bad input, with one
exception: reading a container where a scalar is expected (or a negative
number as unsigned) raises `RequestParseError`, whose handling depends on the
API version and is decided by the caller.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
import typing

from ledger_entry.core import fields
from ledger_entry.core.exceptions import EntryLookupError
from ledger_entry.core.types import (
    ClassifiedCommand,
    ErrorKind,
    Failure,
    RequestVariant,
    Result,
    Success,
)
from ledger_entry.protocol import keylets
from ledger_entry.protocol.accounts import AccountID
from ledger_entry.protocol.bridge import (
    ISSUING_CHAIN_DOOR,
    ISSUING_CHAIN_ISSUE,
    LOCKING_CHAIN_DOOR,
    LOCKING_CHAIN_ISSUE,
    ChainType,
    XChainBridge,
    parse_bridge,
)
from ledger_entry.protocol.currency import Currency, parse_issue
from ledger_entry.protocol.hashes import Hash256

KeyOutcome = Result[Hash256, EntryLookupError]
Validator = Callable[[ClassifiedCommand], KeyOutcome]


def _fail(kind: ErrorKind = ErrorKind.MALFORMED_REQUEST) -> KeyOutcome:
    return Failure(EntryLookupError(kind))


def _hex_key(value: typing.Any) -> KeyOutcome:
    """A bare key given as 64 hex digits."""
    key = Hash256.from_hex(fields.as_string(value))
    if key is None:
        return _fail()
    return Success(key)


def _account(value: typing.Any) -> AccountID | None:
    return AccountID.from_base58(fields.as_string(value))


def unrecognized_shape_error(api_version: int) -> ErrorKind:
    """Error kind for a request matching no known shape.

    This is the only rule where the API version selects the error kind.
    """
    return ErrorKind.UNKNOWN_OPTION if api_version < 2 else ErrorKind.INVALID_PARAMS


# --- Hex-only and account-only shapes ---


def by_index(command: ClassifiedCommand) -> KeyOutcome:
    return _hex_key(command.value)


def hex_only(command: ClassifiedCommand) -> KeyOutcome:
    """Shapes identified only by their key: checks and payment channels."""
    return _hex_key(command.value)


def account_root(command: ClassifiedCommand) -> KeyOutcome:
    account = _account(command.value)
    if account is None or account.is_zero:
        return _fail(ErrorKind.MALFORMED_ADDRESS)
    return Success(keylets.account(account))


def did(command: ClassifiedCommand) -> KeyOutcome:
    account = _account(command.value)
    if account is None or account.is_zero:
        return _fail(ErrorKind.MALFORMED_ADDRESS)
    return Success(keylets.did(account))


def nft_page(command: ClassifiedCommand) -> KeyOutcome:
    if not fields.is_string(command.value):
        return _fail()
    return _hex_key(command.value)


def legacy_positional(command: ClassifiedCommand) -> KeyOutcome:
    return _hex_key(command.value)


def unrecognized(command: ClassifiedCommand) -> KeyOutcome:
    return _fail(unrecognized_shape_error(command.initial.api_version))


# --- Account pairs ---


def deposit_preauth(command: ClassifiedCommand) -> KeyOutcome:
    value = command.value
    if not fields.is_object(value):
        if not fields.is_string(value):
            return _fail()
        return _hex_key(value)

    owner_text = fields.get(value, "owner")
    authorized_text = fields.get(value, "authorized")
    if not fields.is_string(owner_text) or not fields.is_string(authorized_text):
        return _fail()

    owner = AccountID.from_base58(owner_text)
    authorized = AccountID.from_base58(authorized_text)
    if owner is None:
        return _fail(ErrorKind.MALFORMED_OWNER)
    if authorized is None:
        return _fail(ErrorKind.MALFORMED_AUTHORIZED)
    return Success(keylets.deposit_preauth(owner, authorized))


def ripple_state(command: ClassifiedCommand) -> KeyOutcome:
    value = command.value
    accounts = fields.get(value, "accounts")
    if (
        not fields.is_object(value)
        or not fields.is_member(value, "currency")
        or not fields.is_array(accounts)
        or len(accounts) != 2
        or not fields.is_string(accounts[0])
        or not fields.is_string(accounts[1])
        or accounts[0] == accounts[1]
    ):
        return _fail()

    low = AccountID.from_base58(accounts[0])
    high = AccountID.from_base58(accounts[1])
    if low is None or high is None:
        return _fail(ErrorKind.MALFORMED_ADDRESS)

    currency = Currency.from_code(fields.as_string(value["currency"]))
    if currency is None:
        return _fail(ErrorKind.MALFORMED_CURRENCY)
    return Success(keylets.line(low, high, currency))


# --- Directories ---


def directory(command: ClassifiedCommand) -> KeyOutcome:
    value = command.value
    if fields.is_null(value):
        return _fail()
    if not fields.is_object(value):
        return _hex_key(value)

    if fields.is_member(value, "sub_index") and not fields.is_integral(
        value["sub_index"]
    ):
        return _fail()
    sub_index = (
        fields.as_uint(value["sub_index"]) if fields.is_member(value, "sub_index") else 0
    )

    if fields.is_member(value, "dir_root"):
        if fields.is_member(value, "owner"):
            # dir_root and owner are mutually exclusive
            return _fail()
        root = Hash256.from_hex(fields.as_string(value["dir_root"]))
        if root is None:
            return _fail()
        return Success(keylets.page(root, sub_index))

    if fields.is_member(value, "owner"):
        owner = _account(value["owner"])
        if owner is None:
            return _fail(ErrorKind.MALFORMED_ADDRESS)
        return Success(keylets.page(keylets.owner_dir(owner), sub_index))

    return _fail()


# --- (account, sequence) shapes ---


def _account_and_sequence(
    value: typing.Any,
    *,
    account_field: str,
    seq_field: str,
    bad_account: ErrorKind,
    derive: Callable[[AccountID, int], Hash256],
) -> KeyOutcome:
    if not fields.is_object(value):
        return _hex_key(value)
    if (
        not fields.is_member(value, account_field)
        or not fields.is_member(value, seq_field)
        or not fields.is_integral(value[seq_field])
    ):
        return _fail()

    account = _account(value[account_field])
    if account is None:
        return _fail(bad_account)
    return Success(derive(account, fields.as_uint(value[seq_field])))


def escrow(command: ClassifiedCommand) -> KeyOutcome:
    return _account_and_sequence(
        command.value,
        account_field="owner",
        seq_field="seq",
        bad_account=ErrorKind.MALFORMED_OWNER,
        derive=keylets.escrow,
    )


def offer(command: ClassifiedCommand) -> KeyOutcome:
    return _account_and_sequence(
        command.value,
        account_field="account",
        seq_field="seq",
        bad_account=ErrorKind.MALFORMED_ADDRESS,
        derive=keylets.offer,
    )


def ticket(command: ClassifiedCommand) -> KeyOutcome:
    return _account_and_sequence(
        command.value,
        account_field="account",
        seq_field="ticket_seq",
        bad_account=ErrorKind.MALFORMED_ADDRESS,
        derive=keylets.ticket,
    )


def oracle(command: ClassifiedCommand) -> KeyOutcome:
    value = command.value
    if not fields.is_object(value):
        return _hex_key(value)
    if not fields.is_member(value, "oracle_document_id") or not fields.is_member(
        value, "account"
    ):
        return _fail()

    raw_id = value["oracle_document_id"]
    document_id: int | None = None
    if fields.is_convertible_to_uint(raw_id):
        document_id = fields.as_uint(raw_id)
    elif fields.is_string(raw_id):
        document_id = fields.parse_uint32(raw_id)

    account = _account(value["account"])
    if account is None or account.is_zero:
        return _fail(ErrorKind.MALFORMED_ADDRESS)
    if document_id is None:
        return _fail(ErrorKind.MALFORMED_DOCUMENT_ID)
    return Success(keylets.oracle(account, document_id))


# --- Asset and bridge shapes ---


def amm(command: ClassifiedCommand) -> KeyOutcome:
    value = command.value
    if not fields.is_object(value):
        return _hex_key(value)
    if not fields.is_member(value, "asset") or not fields.is_member(value, "asset2"):
        return _fail()

    issue = parse_issue(value["asset"])
    issue2 = parse_issue(value["asset2"])
    if isinstance(issue, Failure) or isinstance(issue2, Failure):
        return _fail()
    return Success(keylets.amm(issue.value, issue2.value))


def bridge(command: ClassifiedCommand) -> KeyOutcome:
    """Every way this can fail is reported as a plain ``malformedRequest``."""
    value = command.value
    if fields.is_string(value):
        return _hex_key(value)

    params = command.initial.params
    account_text = params.get("bridge_account")
    if not fields.is_string(account_text):
        return _fail()
    account = AccountID.from_base58(account_text)
    if account is None or account.is_zero:
        return _fail()

    parsed = parse_bridge(value)
    if isinstance(parsed, Failure):
        return _fail()
    spec = parsed.value
    chain = ChainType.src_chain(account == spec.locking_chain_door)
    if account != spec.door(chain):
        return _fail()
    return Success(keylets.bridge(spec, chain))


def _xchain_claim(
    value: typing.Any,
    *,
    seq_field: str,
    derive: Callable[[XChainBridge, int], Hash256],
) -> KeyOutcome:
    if fields.is_string(value):
        return _hex_key(value)
    if (
        not fields.is_object(value)
        or not fields.is_string(fields.get(value, ISSUING_CHAIN_DOOR))
        or not fields.is_string(fields.get(value, LOCKING_CHAIN_DOOR))
        or not fields.is_member(value, ISSUING_CHAIN_ISSUE)
        or not fields.is_member(value, LOCKING_CHAIN_ISSUE)
        or not fields.is_member(value, seq_field)
    ):
        return _fail()

    locking_door = AccountID.from_base58(value[LOCKING_CHAIN_DOOR])
    issuing_door = AccountID.from_base58(value[ISSUING_CHAIN_DOOR])
    if locking_door is None or issuing_door is None:
        return _fail()

    locking_issue = parse_issue(value[LOCKING_CHAIN_ISSUE])
    issuing_issue = parse_issue(value[ISSUING_CHAIN_ISSUE])
    if isinstance(locking_issue, Failure) or isinstance(issuing_issue, Failure):
        return _fail()

    if not fields.is_integral(value[seq_field]):
        return _fail()

    spec = XChainBridge(
        locking_chain_door=locking_door,
        locking_chain_issue=locking_issue.value,
        issuing_chain_door=issuing_door,
        issuing_chain_issue=issuing_issue.value,
    )
    return Success(derive(spec, fields.as_uint(value[seq_field])))


def xchain_owned_claim_id(command: ClassifiedCommand) -> KeyOutcome:
    return _xchain_claim(
        command.value,
        seq_field="xchain_owned_claim_id",
        derive=keylets.xchain_claim_id,
    )


def xchain_owned_create_account_claim_id(command: ClassifiedCommand) -> KeyOutcome:
    return _xchain_claim(
        command.value,
        seq_field="xchain_owned_create_account_claim_id",
        derive=keylets.xchain_create_account_claim_id,
    )


VALIDATORS: Mapping[RequestVariant, Validator] = {
    RequestVariant.BY_INDEX: by_index,
    RequestVariant.ACCOUNT_ROOT: account_root,
    RequestVariant.CHECK: hex_only,
    RequestVariant.DEPOSIT_PREAUTH: deposit_preauth,
    RequestVariant.DIRECTORY: directory,
    RequestVariant.ESCROW: escrow,
    RequestVariant.OFFER: offer,
    RequestVariant.PAYMENT_CHANNEL: hex_only,
    RequestVariant.RIPPLE_STATE: ripple_state,
    RequestVariant.TICKET: ticket,
    RequestVariant.NFT_PAGE: nft_page,
    RequestVariant.AMM: amm,
    RequestVariant.BRIDGE: bridge,
    RequestVariant.XCHAIN_OWNED_CLAIM_ID: xchain_owned_claim_id,
    RequestVariant.XCHAIN_OWNED_CREATE_ACCOUNT_CLAIM_ID: (
        xchain_owned_create_account_claim_id
    ),
    RequestVariant.DID: did,
    RequestVariant.ORACLE: oracle,
    RequestVariant.LEGACY_POSITIONAL: legacy_positional,
    RequestVariant.UNRECOGNIZED: unrecognized,
}
