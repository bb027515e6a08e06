"""Request classification stage of the pipeline."""

from collections.abc import Iterable, Mapping
import dataclasses
import logging
from typing import Any, Never

from ledger_entry.core import fields
from ledger_entry.core.types import (
    ClassifiedCommand,
    LookupCommand,
    RequestVariant,
    Result,
    Success,
)
from ledger_entry.pipeline.base import BaseHandler
from ledger_entry.protocol.ledger_types import LedgerEntryType

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class VariantRule:
    """Selects ``variant`` when the request has a top-level ``field``."""

    field: str
    variant: RequestVariant
    expected_type: LedgerEntryType | None


# Request shapes are meant to be mutually exclusive, but clients do not always
# respect that; the first present field in this order wins.
DISPATCH_TABLE: tuple[VariantRule, ...] = (
    VariantRule("index", RequestVariant.BY_INDEX, None),
    VariantRule(
        "account_root", RequestVariant.ACCOUNT_ROOT, LedgerEntryType.ACCOUNT_ROOT
    ),
    VariantRule("check", RequestVariant.CHECK, LedgerEntryType.CHECK),
    VariantRule(
        "deposit_preauth",
        RequestVariant.DEPOSIT_PREAUTH,
        LedgerEntryType.DEPOSIT_PREAUTH,
    ),
    VariantRule("directory", RequestVariant.DIRECTORY, LedgerEntryType.DIR_NODE),
    VariantRule("escrow", RequestVariant.ESCROW, LedgerEntryType.ESCROW),
    VariantRule("offer", RequestVariant.OFFER, LedgerEntryType.OFFER),
    VariantRule(
        "payment_channel", RequestVariant.PAYMENT_CHANNEL, LedgerEntryType.PAYCHAN
    ),
    VariantRule(
        "ripple_state", RequestVariant.RIPPLE_STATE, LedgerEntryType.RIPPLE_STATE
    ),
    VariantRule("ticket", RequestVariant.TICKET, LedgerEntryType.TICKET),
    VariantRule("nft_page", RequestVariant.NFT_PAGE, LedgerEntryType.NFTOKEN_PAGE),
    VariantRule("amm", RequestVariant.AMM, LedgerEntryType.AMM),
    VariantRule("bridge", RequestVariant.BRIDGE, LedgerEntryType.BRIDGE),
    VariantRule(
        "xchain_owned_claim_id",
        RequestVariant.XCHAIN_OWNED_CLAIM_ID,
        LedgerEntryType.XCHAIN_OWNED_CLAIM_ID,
    ),
    VariantRule(
        "xchain_owned_create_account_claim_id",
        RequestVariant.XCHAIN_OWNED_CREATE_ACCOUNT_CLAIM_ID,
        LedgerEntryType.XCHAIN_OWNED_CREATE_ACCOUNT_CLAIM_ID,
    ),
    VariantRule("did", RequestVariant.DID, LedgerEntryType.DID),
    VariantRule("oracle", RequestVariant.ORACLE, LedgerEntryType.ORACLE),
)

LEGACY_FIELD = "params"


class VariantClassifier(BaseHandler[LookupCommand, ClassifiedCommand, Never]):
    """Selects exactly one request variant per request.

    Falls back to the legacy ``params: ["<hex>"]`` form, and to
    `RequestVariant.UNRECOGNIZED` when nothing matches. Classification only
    probes field presence and types, so it never fails.
    """

    stage_name = "classify"

    def __init__(self, rules: Iterable[VariantRule] = DISPATCH_TABLE) -> None:
        """Initialize with an ordered rule table."""
        self._rules = tuple(rules)

    def handle(self, command: LookupCommand) -> Result[ClassifiedCommand, Never]:
        """Attach the selected variant, its expected type, and its value."""
        variant, expected_type, value = self.classify(command.params)
        logger.debug("Classified request as %s", variant)
        return Success(
            ClassifiedCommand(
                initial=command,
                variant=variant,
                expected_type=expected_type,
                value=value,
            )
        )

    def classify(
        self, params: Mapping[str, Any]
    ) -> tuple[RequestVariant, LedgerEntryType | None, Any]:
        for rule in self._rules:
            if fields.is_member(params, rule.field):
                return rule.variant, rule.expected_type, params[rule.field]

        legacy = params.get(LEGACY_FIELD)
        if fields.is_array(legacy) and len(legacy) == 1 and fields.is_string(legacy[0]):
            return RequestVariant.LEGACY_POSITIONAL, None, legacy[0]
        return RequestVariant.UNRECOGNIZED, None, None
