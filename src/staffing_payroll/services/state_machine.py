"""Status state machines with table-driven transition validation.

The four lifecycles (pay period, payroll run, client invoice, time-off request)
share one helper, ``attempt_transition``, and differ only in their tables.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar, Mapping

from staffing_payroll.exceptions import InvalidTransition

TransitionTable = Mapping[str, frozenset[str]]


class PayPeriodStatus(str, Enum):
    """Pay period status values."""

    OPEN = "open"
    CLOSED = "closed"
    PROCESSED = "processed"


class PayrollRunStatus(str, Enum):
    """Payroll run status values."""

    DRAFT = "draft"
    PROCESSED = "processed"
    SENT = "sent"


class InvoiceStatus(str, Enum):
    """Client invoice status values."""

    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"


class TimeOffStatus(str, Enum):
    """Time-off request status values."""

    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


def _value(status: str | Enum) -> str:
    return status.value if isinstance(status, Enum) else status


def attempt_transition(current: str, requested: str, table: TransitionTable) -> str:
    """Return ``requested`` if the table allows it from ``current``.

    Raises:
        InvalidTransition: naming the current, requested and allowed statuses.
    """
    current = _value(current)
    requested = _value(requested)
    allowed = table.get(current, frozenset())
    if requested not in allowed:
        raise InvalidTransition(current, requested, allowed)
    return requested


class StatusStateMachine:
    """Base class; subclasses only declare ``VALID_TRANSITIONS``."""

    VALID_TRANSITIONS: ClassVar[dict[str, frozenset[str]]] = {}

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(_value(from_status), frozenset())
        return _value(to_status) in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> str:
        """Validate a transition, raising InvalidTransition if invalid."""
        return attempt_transition(from_status, to_status, cls.VALID_TRANSITIONS)

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get sorted list of valid next statuses from current status."""
        return sorted(cls.VALID_TRANSITIONS.get(_value(current_status), frozenset()))

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return not cls.VALID_TRANSITIONS.get(_value(status))


class PayPeriodStateMachine(StatusStateMachine):
    """open -> closed -> processed; closed may revert to open."""

    VALID_TRANSITIONS = {
        PayPeriodStatus.OPEN.value: frozenset({PayPeriodStatus.CLOSED.value}),
        PayPeriodStatus.CLOSED.value: frozenset(
            {PayPeriodStatus.OPEN.value, PayPeriodStatus.PROCESSED.value}
        ),
        PayPeriodStatus.PROCESSED.value: frozenset(),
    }

    # Work entries may be created, edited or deleted only here
    INPUTS_MUTABLE = frozenset({PayPeriodStatus.OPEN.value})

    # Payroll may be generated only here
    PAYROLL_ALLOWED = frozenset({PayPeriodStatus.CLOSED.value})

    # Statuses that block an overlapping period of the same type
    BLOCKS_OVERLAP = frozenset({PayPeriodStatus.OPEN.value, PayPeriodStatus.CLOSED.value})

    @classmethod
    def can_modify_inputs(cls, status: str) -> bool:
        return _value(status) in cls.INPUTS_MUTABLE

    @classmethod
    def can_generate_payroll(cls, status: str) -> bool:
        return _value(status) in cls.PAYROLL_ALLOWED


class PayrollRunStateMachine(StatusStateMachine):
    """draft -> processed -> sent."""

    VALID_TRANSITIONS = {
        PayrollRunStatus.DRAFT.value: frozenset({PayrollRunStatus.PROCESSED.value}),
        PayrollRunStatus.PROCESSED.value: frozenset({PayrollRunStatus.SENT.value}),
        PayrollRunStatus.SENT.value: frozenset(),
    }

    EXPORTABLE = frozenset({PayrollRunStatus.PROCESSED.value, PayrollRunStatus.SENT.value})

    @classmethod
    def can_export(cls, status: str) -> bool:
        return _value(status) in cls.EXPORTABLE


class InvoiceStateMachine(StatusStateMachine):
    """draft -> sent -> paid."""

    VALID_TRANSITIONS = {
        InvoiceStatus.DRAFT.value: frozenset({InvoiceStatus.SENT.value}),
        InvoiceStatus.SENT.value: frozenset({InvoiceStatus.PAID.value}),
        InvoiceStatus.PAID.value: frozenset(),
    }


class TimeOffStateMachine(StatusStateMachine):
    """pending -> approved | denied; both decisions are final."""

    VALID_TRANSITIONS = {
        TimeOffStatus.PENDING.value: frozenset(
            {TimeOffStatus.APPROVED.value, TimeOffStatus.DENIED.value}
        ),
        TimeOffStatus.APPROVED.value: frozenset(),
        TimeOffStatus.DENIED.value: frozenset(),
    }
