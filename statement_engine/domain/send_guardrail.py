"""Send eligibility for statement emails.

``check_negative_balance_guardrail`` is the single gate every automated
send goes through: statements owing money are held for manual review.
"""

import logging
from collections.abc import Mapping
from decimal import Decimal

from statement_engine.config import settings
from statement_engine.schemas.statement import GuardrailResult, SendEligibility, Statement
from statement_engine.utils.validators import parse_amount, validate_email_address

logger = logging.getLogger(__name__)


def _owner_payout_of(statement: Statement | Mapping | None) -> Decimal:
    if statement is None:
        return Decimal("0")
    if isinstance(statement, Statement):
        return statement.owner_payout
    if isinstance(statement, Mapping):
        return parse_amount(statement.get("owner_payout", statement.get("ownerPayout")))
    return parse_amount(getattr(statement, "owner_payout", None))


def check_negative_balance_guardrail(statement: Statement | Mapping | None) -> GuardrailResult:
    """Check whether a statement may be sent automatically.

    Args:
        statement: Statement, or a plain mapping carrying ``owner_payout``

    Returns:
        GuardrailResult: ``can_send`` is False only for a payout below zero
    """
    owner_payout = _owner_payout_of(statement)

    if owner_payout < 0:
        return GuardrailResult(
            can_send=False,
            reason="NEGATIVE_BALANCE",
            message=f"Statement has negative balance (${owner_payout:.2f}). Flagged for manual review.",
            owner_payout=owner_payout,
        )

    return GuardrailResult(
        can_send=True,
        reason="POSITIVE_BALANCE",
        message="Statement has positive balance. OK to send.",
        owner_payout=owner_payout,
    )


def can_send_email(
    statement: Statement | Mapping | None,
    recipient_email: str | None,
    smtp_configured: bool | None = None,
) -> SendEligibility:
    """Collect every reason a statement email cannot be sent.

    Args:
        statement: Statement to send
        recipient_email: Owner email address
        smtp_configured: Whether outgoing mail is configured (defaults to
            ``settings.smtp_configured``)

    Returns:
        SendEligibility: ``can_send`` with the full list of blocking errors
    """
    if smtp_configured is None:
        smtp_configured = settings.smtp_configured

    errors: list[str] = []

    if not smtp_configured:
        errors.append("SMTP not configured")

    if not recipient_email:
        errors.append("No recipient email")
    elif not validate_email_address(recipient_email):
        errors.append("Invalid email format")

    if statement is None:
        errors.append("No statement provided")

    guardrail = check_negative_balance_guardrail(statement)
    if not guardrail.can_send:
        errors.append("Negative balance")

    if errors:
        logger.warning(f"Statement email blocked: {', '.join(errors)}")

    return SendEligibility(can_send=not errors, errors=errors)
