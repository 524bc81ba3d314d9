from __future__ import annotations

from datetime import datetime
from operator import attrgetter
from typing import TYPE_CHECKING, Iterable, List, Optional

from transactions_api.errors import ValidationError
from transactions_api.services.timezones import normalize_zone_id, resolve_zone, to_zone

if TYPE_CHECKING:
    from transactions_api.models import Transaction


# Results are ordered by the stored local timestamp, not the converted one.
_by_stored_date = attrgetter("transaction_date")


def check_date_range(start_date: Optional[datetime], end_date: Optional[datetime]) -> None:
    if start_date is None or end_date is None:
        raise ValidationError("Both startDate and endDate are required.")
    if start_date.tzinfo is not None or end_date.tzinfo is not None:
        # Bounds are wall-clock times in the requested zone; an offset would be ambiguous.
        raise ValidationError("startDate and endDate must be local times without a UTC offset.")
    if start_date > end_date:
        raise ValidationError(
            f"startDate ({start_date.isoformat()}) must not be later than endDate ({end_date.isoformat()})."
        )


def filter_by_user_time_zone(
    transactions: Iterable["Transaction"],
    start_date: datetime,
    end_date: datetime,
    user_time_zone: Optional[str],
) -> List["Transaction"]:
    """
    Select transactions whose time, converted into `user_time_zone`, falls in
    [start_date, end_date] (both inclusive, expressed in the user's zone).

    Each record's own zone is normalized once and resolved; the result is
    sorted by the record's stored `transaction_date`.
    """
    check_date_range(start_date, end_date)
    if not user_time_zone:
        raise ValidationError("userTimeZone is required for time-zone aware filtering.")
    target = resolve_zone(user_time_zone)

    selected = []
    for transaction in transactions:
        source = resolve_zone(normalize_zone_id(transaction.timezone))
        user_local_time = to_zone(transaction.transaction_date, source, target)
        if start_date <= user_local_time <= end_date:
            selected.append(transaction)

    return sorted(selected, key=_by_stored_date)


def filter_by_local_time(
    transactions: Iterable["Transaction"],
    start_date: datetime,
    end_date: datetime,
) -> List["Transaction"]:
    """
    Select by the transaction's own local time, with no zone conversion.

    GET /date-range pushes the same comparison down to the database through
    store.query_by_date_range; this is the in-memory counterpart.
    """
    check_date_range(start_date, end_date)
    selected = [t for t in transactions if start_date <= t.transaction_date <= end_date]
    return sorted(selected, key=_by_stored_date)
