from __future__ import annotations

from datetime import datetime
from typing import Iterable, List

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from transactions_api.models import Transaction


_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

_COLUMNS = (
    "transaction_id",
    "name",
    "email",
    "amount",
    "transaction_date",
    "client_location",
    "timezone",
    "status",
)


def _insert_for(session: Session):
    dialect = session.get_bind().dialect.name
    try:
        return _DIALECT_INSERTS[dialect]
    except KeyError:
        raise RuntimeError(f"Upsert is not supported for the {dialect!r} dialect.")


def _row_values(transaction: Transaction) -> dict:
    # Unset attributes are left out so the column defaults apply.
    values = {}
    for col in _COLUMNS:
        value = getattr(transaction, col)
        if value is not None:
            values[col] = value
    return values


def upsert_transaction(session: Session, transaction: Transaction) -> None:
    """
    Insert the transaction, or, if its transaction_id already exists,
    overwrite only the stored status.
    """
    insert = _insert_for(session)
    stmt = insert(Transaction).values(_row_values(transaction))
    stmt = stmt.on_conflict_do_update(
        index_elements=[Transaction.transaction_id],
        set_={"status": stmt.excluded.status},
    )
    session.execute(stmt)


def upsert_transactions(session: Session, transactions: Iterable[Transaction]) -> int:
    # One statement per row: a multi-row ON CONFLICT cannot touch the same id twice.
    count = 0
    for transaction in transactions:
        upsert_transaction(session, transaction)
        count += 1
    session.flush()
    return count


def query_all(session: Session) -> List[Transaction]:
    return list(session.execute(select(Transaction)).scalars())


def query_by_date_range(session: Session, start_date: datetime, end_date: datetime) -> List[Transaction]:
    """Transactions with start_date <= transaction_date <= end_date, oldest first."""
    stmt = (
        select(Transaction)
        .where(Transaction.transaction_date >= start_date, Transaction.transaction_date <= end_date)
        .order_by(Transaction.transaction_date)
    )
    return list(session.execute(stmt).scalars())


def delete_all(session: Session) -> int:
    result = session.execute(delete(Transaction))
    return result.rowcount or 0
