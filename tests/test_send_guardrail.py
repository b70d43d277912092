from datetime import date
from decimal import Decimal

import pytest

from statement_engine.config import Settings
from statement_engine.domain import send_guardrail
from statement_engine.domain.send_guardrail import can_send_email, check_negative_balance_guardrail
from statement_engine.schemas.statement import Statement, StatementPeriod, StatementTotals


def make_statement(owner_payout: str) -> Statement:
    return Statement(
        property_ids=[100001],
        period=StatementPeriod(start=date(2025, 11, 1), end=date(2025, 11, 30)),
        totals=StatementTotals(owner_payout=Decimal(owner_payout)),
    )


def test_negative_balance_blocks_send():
    result = check_negative_balance_guardrail(make_statement("-125.5"))

    assert result.can_send is False
    assert result.reason == "NEGATIVE_BALANCE"
    assert result.message == "Statement has negative balance ($-125.50). Flagged for manual review."


@pytest.mark.parametrize("payout", ["0", "0.01", "1500"])
def test_zero_or_positive_balance_can_send(payout):
    result = check_negative_balance_guardrail(make_statement(payout))
    assert result.can_send is True
    assert result.reason == "POSITIVE_BALANCE"


@pytest.mark.parametrize(
    "record, can_send",
    [
        ({"owner_payout": "-10.00"}, False),
        ({"ownerPayout": -3}, False),
        ({"owner_payout": "250"}, True),
        ({"owner_payout": "n/a"}, True),
        ({}, True),
    ],
)
def test_guardrail_accepts_plain_records(record, can_send):
    assert check_negative_balance_guardrail(record).can_send is can_send


def test_missing_statement_treated_as_zero_balance():
    result = check_negative_balance_guardrail(None)
    assert result.can_send is True
    assert result.owner_payout == Decimal("0")


def test_can_send_email_when_everything_is_in_place():
    eligibility = can_send_email(make_statement("100"), "owner@example.com", smtp_configured=True)
    assert eligibility.can_send is True
    assert eligibility.errors == []


def test_can_send_email_collects_every_error():
    eligibility = can_send_email(make_statement("-1"), "not-an-email", smtp_configured=False)

    assert eligibility.can_send is False
    assert eligibility.errors == ["SMTP not configured", "Invalid email format", "Negative balance"]


def test_can_send_email_without_statement_or_recipient():
    eligibility = can_send_email(None, None, smtp_configured=True)
    assert eligibility.errors == ["No recipient email", "No statement provided"]


def test_can_send_email_defaults_to_configured_smtp(monkeypatch):
    configured = Settings(_env_file=None, smtp_host="smtp.example.com", smtp_user="mailer", smtp_password="secret")
    monkeypatch.setattr(send_guardrail, "settings", configured)
    assert can_send_email(make_statement("100"), "owner@example.com").can_send is True

    monkeypatch.setattr(send_guardrail, "settings", Settings(_env_file=None, smtp_host=None))
    assert can_send_email(make_statement("100"), "owner@example.com").errors == ["SMTP not configured"]
