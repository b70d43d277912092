"""Statement generation service.

Generation is a pure computation over records fetched by the caller:
select the period's reservations and expenses, compute one payout line per
reservation, reduce the lines into totals and attach the calendar
conversion advisory. Persistence and delivery happen outside.
"""

import asyncio
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from statement_engine.config import settings as app_settings
from statement_engine.core.exceptions import ValidationError
from statement_engine.domain.overlap_advisor import (
    find_overlapping_reservations,
    generate_calendar_notice,
    should_convert_to_calendar,
    should_skip_statement,
)
from statement_engine.domain.period_filter import filter_period_reservations
from statement_engine.domain.statement_state import next_statement_status
from statement_engine.schemas.property_settings import PropertySettings
from statement_engine.schemas.reservation import Expense, Reservation
from statement_engine.schemas.statement import Statement, StatementPeriod
from statement_engine.services.expense_service import (
    check_cleaning_mismatch,
    select_period_expenses,
    summarize_expenses,
)
from statement_engine.services.payout_service import payout_service
from statement_engine.services.settings_service import (
    PropertySettingsMap,
    build_settings_map,
    resolve_effective_settings,
)
from statement_engine.utils.validators import coerce_property_id

logger = logging.getLogger(__name__)

SettingsInput = PropertySettings | PropertySettingsMap | Mapping[Any, Any] | None


def _normalize_property_ids(property_ids: object) -> list[int]:
    """Guard: a statement needs at least one numeric property id."""
    raw = property_ids if isinstance(property_ids, (list, tuple, set)) else [property_ids]
    ids: list[int] = []
    for value in raw:
        property_id = coerce_property_id(value)
        if property_id is None:
            raise ValidationError(f"Invalid property id: {value!r}")
        if property_id not in ids:
            ids.append(property_id)
    if not ids:
        raise ValidationError("Statement requires at least one property id")
    return ids


def _build_period(period: StatementPeriod | Mapping[str, Any]) -> StatementPeriod:
    """Guard: reject inverted periods and unknown calculation types before generation."""
    if isinstance(period, StatementPeriod):
        return period
    try:
        return StatementPeriod.model_validate(period)
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid statement period",
            errors=[{"loc": err["loc"], "msg": err["msg"]} for err in e.errors()],
        ) from e


@dataclass(frozen=True)
class StatementRequest:
    """One statement to generate in a bulk run."""

    property_ids: list[int] | int
    period: StatementPeriod
    settings: SettingsInput = None


@dataclass
class BulkResult:
    """Outcome of one statement in a bulk run."""

    property_ids: list[int] | int
    statement: Statement | None = None
    skipped: bool = False
    error: str | None = None


@dataclass
class BulkSummary:
    """Outcome of a bulk run, results in request order."""

    results: list[BulkResult] = field(default_factory=list)

    @property
    def generated(self) -> list[Statement]:
        return [r.statement for r in self.results if r.statement is not None]

    @property
    def skipped_count(self) -> int:
        return sum(1 for r in self.results if r.skipped)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.results if r.error is not None)


class StatementService:
    """Service for generating and recomputing owner statements."""

    def generate_statement(
        self,
        reservations: Iterable[Reservation],
        expenses: Iterable[Expense],
        property_ids: list[int] | int | str,
        period: StatementPeriod | Mapping[str, Any],
        settings: SettingsInput = None,
    ) -> Statement | None:
        """Generate a statement for one property or a combined group.

        Args:
            reservations: Raw reservations (may include other properties)
            expenses: Raw expenses (may include other properties and dates)
            property_ids: Property id, or list of ids for a combined statement
            period: Period and calculation type
            settings: One ``PropertySettings`` for every property, or a
                mapping of property id to settings

        Returns:
            Statement | None: None when the period has neither occupancy nor expenses

        Raises:
            ValidationError: Missing/invalid property ids or an invalid period
        """
        ids = _normalize_property_ids(property_ids)
        period = _build_period(period)
        settings_map = build_settings_map(ids, settings)
        reservations = list(reservations)
        mode = period.calculation_type

        period_reservations: list[Reservation] = []
        overlapping: list[Reservation] = []
        for property_id in ids:
            period_reservations.extend(
                filter_period_reservations(reservations, property_id, mode, period.start, period.end)
            )
            overlapping.extend(
                find_overlapping_reservations(reservations, property_id, period.start, period.end)
            )
        period_reservations.sort(key=lambda res: (res.check_in, res.id))

        period_expenses = select_period_expenses(expenses, ids, period.start, period.end)

        if should_skip_statement(overlapping, period_expenses):
            logger.info(
                f"Skipping statement for properties {ids} ({period.start} to {period.end}): "
                "no occupancy and no expenses"
            )
            return None

        flagged = should_convert_to_calendar(mode, period_reservations, overlapping, period.start, period.end)

        statement = self._compute(
            Statement(
                property_ids=ids,
                period=period,
                reservations=period_reservations,
                expenses=period_expenses,
                should_convert_to_calendar=flagged,
                calendar_conversion_notice=generate_calendar_notice(mode, overlapping) if flagged else "",
                overlapping_reservation_count=len(overlapping),
            ),
            settings_map,
        )

        logger.info(
            f"Generated {mode} statement for properties {ids} ({period.start} to {period.end}): "
            f"{len(statement.lines)} reservation(s), owner payout {statement.owner_payout:.2f}"
        )
        if flagged:
            logger.info(f"Statement {statement.id} flagged for calendar conversion")

        return statement

    def recalculate_statement(
        self,
        statement: Statement,
        current_property_settings: SettingsInput,
    ) -> Statement:
        """Recompute a stored statement with the properties' current settings.

        The reservation and expense snapshot, advisory fields and status
        are kept; only settings-dependent figures change.
        """
        settings_map = resolve_effective_settings(statement, current_property_settings or {})
        return self._compute(statement, settings_map)

    def apply_action(self, statement: Statement, action: str) -> Statement:
        """Apply a send/review action and return the statement with its new status."""
        status = next_statement_status(statement.status, action, statement.owner_payout)
        if status == statement.status:
            return statement
        logger.info(f"Statement {statement.id}: {statement.status} → {status} ({action})")
        return statement.model_copy(update={"status": status})

    async def generate_bulk(
        self,
        reservations: Iterable[Reservation],
        expenses: Iterable[Expense],
        requests: Sequence[StatementRequest],
    ) -> BulkSummary:
        """Generate many independent statements concurrently.

        One failing request is recorded in its result and does not stop the
        others.
        """
        reservations = list(reservations)
        expenses = list(expenses)
        semaphore = asyncio.Semaphore(max(1, app_settings.bulk_max_concurrency))

        async def run(request: StatementRequest) -> BulkResult:
            async with semaphore:
                try:
                    statement = await asyncio.to_thread(
                        self.generate_statement,
                        reservations,
                        expenses,
                        request.property_ids,
                        request.period,
                        request.settings,
                    )
                except ValidationError as e:
                    logger.error(f"Bulk statement for {request.property_ids} failed: {e.detail}")
                    return BulkResult(property_ids=request.property_ids, error=e.detail)
                return BulkResult(
                    property_ids=request.property_ids,
                    statement=statement,
                    skipped=statement is None,
                )

        results = await asyncio.gather(*(run(request) for request in requests))
        summary = BulkSummary(results=list(results))
        logger.info(
            f"Bulk generation finished: {len(summary.generated)} generated, "
            f"{summary.skipped_count} skipped, {summary.failed_count} failed"
        )
        return summary

    def _compute(self, statement: Statement, settings_map: PropertySettingsMap) -> Statement:
        period = statement.period
        expense_summary = summarize_expenses(statement.expenses, settings_map)
        lines = payout_service.calculate_lines(statement.reservations, settings_map, period)
        totals = payout_service.aggregate_totals(lines, expense_summary)
        cleaning_warning = check_cleaning_mismatch(
            statement.reservations, statement.expenses, statement.property_ids, settings_map
        )
        return statement.model_copy(
            update={
                "lines": lines,
                "totals": totals,
                "ll_cover_expenses": expense_summary.ll_cover_expenses,
                "suppressed_expenses": expense_summary.suppressed_expenses,
                "counted_expenses": expense_summary.expenses,
                "cleaning_mismatch_warning": cleaning_warning,
            }
        )


statement_service = StatementService()
