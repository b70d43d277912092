from datetime import date
from decimal import Decimal

import pytest

from statement_engine.schemas.reservation import Expense, Reservation


@pytest.fixture
def make_reservation():
    counter = {"n": 0}

    def factory(**overrides) -> Reservation:
        counter["n"] += 1
        data = {
            "id": f"res-{counter['n']}",
            "property_id": 100001,
            "source": "VRBO",
            "guest_name": "Test Guest",
            "check_in": date(2025, 11, 5),
            "check_out": date(2025, 11, 10),
            "status": "confirmed",
            "client_revenue": Decimal("1000"),
            "client_tax_responsibility": Decimal("0"),
        }
        data.update(overrides)
        return Reservation(**data)

    return factory


@pytest.fixture
def make_expense():
    counter = {"n": 0}

    def factory(**overrides) -> Expense:
        counter["n"] += 1
        data = {
            "id": f"exp-{counter['n']}",
            "property_id": 100001,
            "date": date(2025, 11, 15),
            "amount": Decimal("-100"),
            "description": "Lawn service",
            "category": "Maintenance",
        }
        data.update(overrides)
        return Expense(**data)

    return factory
