"""Base protocol for pipeline handlers."""

from typing import Protocol, TypeVar

from ledger_entry.core.exceptions import LedgerEntryError
from ledger_entry.core.types import Result

# Contravariant input (handlers can accept supertypes), invariant output
T_In = TypeVar("T_In", contravariant=True)
T_Out = TypeVar("T_Out")
T_Error = TypeVar("T_Error", bound=LedgerEntryError)


class BaseHandler(Protocol[T_In, T_Out, T_Error]):
    """Protocol for pipeline handlers.

    Each handler performs a single transformation on the command object and
    runs to completion without suspending; requests are independent, so a
    handler holds no per-request state.
    """

    stage_name: str

    def handle(self, command: T_In) -> Result[T_Out, T_Error]:
        """Advance ``command`` one stage, or return the request-level error."""
        ...
