"""Statement status state machine.

States:
- draft: Generated, not yet sent
- pending: Queued for an automated send
- sent: Delivered to the owner
- flagged_negative_balance: Send blocked, owner payout below zero
- sent_negative_balance: Force-sent despite a negative payout
- reviewed_approved / reviewed_sent_manually / reviewed_waived: Review outcomes
"""

from decimal import Decimal

from statement_engine.core.exceptions import ValidationError

STATEMENT_STATUSES = (
    "draft",
    "pending",
    "sent",
    "flagged_negative_balance",
    "reviewed_approved",
    "reviewed_sent_manually",
    "reviewed_waived",
    "sent_negative_balance",
)

STATEMENT_TRANSITIONS = {
    "draft": {"pending", "sent", "flagged_negative_balance", "sent_negative_balance"},
    "pending": {"sent", "flagged_negative_balance", "sent_negative_balance"},
    "sent": set(),
    "flagged_negative_balance": {
        "sent_negative_balance",
        "reviewed_approved",
        "reviewed_sent_manually",
        "reviewed_waived",
    },
    "sent_negative_balance": set(),
    "reviewed_approved": set(),
    "reviewed_sent_manually": set(),
    "reviewed_waived": set(),
}

REVIEW_OUTCOMES = {
    "approved": "reviewed_approved",
    "sent_manually": "reviewed_sent_manually",
    "waived": "reviewed_waived",
}


def is_valid_status(status: str) -> bool:
    return status in STATEMENT_STATUSES


def assert_statement_transition(current: str, target: str) -> None:
    allowed = STATEMENT_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise ValidationError(
            f"Invalid statement transition: {current} → {target}"
        )


def next_statement_status(current: str, action: str, owner_payout: Decimal | float | int) -> str:
    """Resolve the status a send/review action leads to.

    Unknown actions, and actions whose target is not a legal transition
    from ``current`` (re-sending a sent or reviewed statement, reviewing an
    unflagged one), leave the status unchanged.

    Args:
        current: Current statement status
        action: "send", "force_send" or "review"
        owner_payout: Statement owner payout

    Returns:
        str: New status
    """
    negative = owner_payout < 0

    if action == "send":
        target = "flagged_negative_balance" if negative else "sent"
    elif action == "force_send":
        target = "sent_negative_balance" if negative else "sent"
    elif action == "review":
        target = "reviewed_approved"
    else:
        return current

    if target not in STATEMENT_TRANSITIONS.get(current, set()):
        return current
    return target


def review_statement(current: str, outcome: str) -> str:
    """Record the outcome of a manual review of a flagged statement.

    Raises:
        ValidationError: If the outcome is unknown or the statement is not flagged
    """
    target = REVIEW_OUTCOMES.get(outcome)
    if target is None:
        raise ValidationError(f"Unknown review outcome: {outcome}")
    assert_statement_transition(current, target)
    return target
