"""Key derivation stage: dispatches a classified request to its validator."""

from collections.abc import Mapping
import logging

from ledger_entry.core.exceptions import EntryLookupError, RequestParseError
from ledger_entry.core.types import (
    ClassifiedCommand,
    ErrorKind,
    Failure,
    KeyedCommand,
    RequestVariant,
    Result,
    Success,
)
from ledger_entry.pipeline.base import BaseHandler
from ledger_entry.pipeline.validators import VALIDATORS, Validator

logger = logging.getLogger(__name__)


class KeyDeriver(BaseHandler[ClassifiedCommand, KeyedCommand, EntryLookupError]):
    """Validates the selected variant and derives its lookup key.

    This is the single place where the API version decides how a structural
    parse error surfaces: as ``invalidParams`` from version 2 on, or by
    propagating `RequestParseError` to the caller for older versions.
    """

    stage_name = "derive_key"

    def __init__(self, validators: Mapping[RequestVariant, Validator] = VALIDATORS):
        """Initialize with a validator for every request variant."""
        missing = set(RequestVariant) - set(validators)
        if missing:
            raise ValueError(
                f"No validator registered for: {', '.join(sorted(missing))}"
            )
        self._validators = dict(validators)

    def handle(
        self, command: ClassifiedCommand
    ) -> Result[KeyedCommand, EntryLookupError]:
        validator = self._validators[command.variant]
        try:
            outcome = validator(command)
        except RequestParseError as e:
            if command.initial.api_version > 1:
                logger.debug("Parse error in %s request: %s", command.variant, e)
                return Failure(EntryLookupError(ErrorKind.INVALID_PARAMS, str(e)))
            raise

        if isinstance(outcome, Failure):
            logger.debug(
                "Rejected %s request: %s", command.variant, outcome.error.kind
            )
            return outcome

        key = outcome.value
        if key.is_zero:
            return Failure(EntryLookupError(ErrorKind.MALFORMED_REQUEST))
        logger.debug("Derived key %s for %s request", key, command.variant)
        return Success(KeyedCommand(classified=command, key=key))
