# inventory_dashboard/services/lifecycle_service.py
"""
Borrow/return transaction lifecycle.

Pure functions over Transaction/Item values: the transition table, overdue
derivation, the sanction view and the list view (search, status filter, sort).
Nothing here performs I/O; callers pass "today" and any local state in.
"""
from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Iterable
from zoneinfo import ZoneInfo

from inventory_dashboard.errors import ConflictError, NotFoundError, ValidationError
from inventory_dashboard.models.transaction import Action, Item, Status, Transaction, TransitionIntent

ALL_STATUSES = "all"

TRANSITIONS: dict[tuple[Status, Action], Status] = {
    (Status.BORROW_PENDING, Action.APPROVE): Status.BORROW_APPROVED,
    (Status.BORROW_PENDING, Action.REJECT): Status.BORROW_REJECTED,
    (Status.RETURN_PENDING, Action.APPROVE): Status.RETURN_APPROVED,
    (Status.RETURN_PENDING, Action.REJECT): Status.RETURN_REJECTED,
}

# hidden from the list view unless completed records are requested;
# borrow-approved stays visible since the item is still out
COMPLETED_STATUSES = frozenset({
    Status.BORROW_REJECTED,
    Status.RETURN_APPROVED,
    Status.RETURN_REJECTED,
})

STATUS_PRIORITY: dict[Status, int] = {
    Status.BORROW_PENDING: 1,
    Status.RETURN_PENDING: 2,
    Status.BORROW_APPROVED: 3,
    Status.RETURN_APPROVED: 4,
    Status.BORROW_REJECTED: 5,
    Status.RETURN_REJECTED: 6,
}

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def today_in(tz: str = "UTC") -> date:
    return datetime.now(ZoneInfo(tz)).date()


def _created_key(tx: Transaction) -> datetime:
    return tx.created_at or _EPOCH


# -----------------------------
# Transitions
# -----------------------------
def parse_action(action) -> Action:
    try:
        return Action(str(action).strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid action: {action!r}", action=str(action))


def next_status(tx: Transaction, action) -> Status:
    act = parse_action(action)
    target = TRANSITIONS.get((tx.status, act))
    if target is None:
        raise ConflictError(
            f"Cannot {act.value} a transaction in status {tx.status.value}",
            transaction_id=tx.id,
            status=tx.status.value,
            action=act.value,
        )
    return target


def apply_transition(tx: Transaction, action, now: datetime | None = None) -> Transaction:
    """Return a copy of `tx` moved through `action`; only status and updated_at change."""
    target = next_status(tx, action)
    return replace(tx, status=target, updated_at=now or datetime.now(timezone.utc))


def transition_intent(tx: Transaction, action) -> TransitionIntent:
    target = next_status(tx, action)
    return TransitionIntent(
        transaction_id=tx.id,
        leg=target.leg,
        status=target.outcome,
        target=target,
    )


# -----------------------------
# Overdue
# -----------------------------
def days_remaining(tx: Transaction, today: date) -> int:
    """Whole calendar days until the due date; negative once it has passed."""
    return (tx.return_date - today).days


def is_overdue(tx: Transaction, today: date) -> bool:
    return tx.status == Status.BORROW_APPROVED and today > tx.return_date


def days_overdue(tx: Transaction, today: date) -> int:
    return max(0, (today - tx.return_date).days)


def overdue_status(tx: Transaction, today: date) -> tuple[int, bool]:
    remaining = days_remaining(tx, today)
    return abs(remaining), remaining < 0


# -----------------------------
# Sanctions
# -----------------------------
def is_sanctioned(tx: Transaction, today: date) -> bool:
    return is_overdue(tx, today) or tx.status == Status.RETURN_REJECTED


def sanction_view(
    transactions: Iterable[Transaction], today: date, resolved_ids: Iterable[str] = ()
) -> list[Transaction]:
    resolved = set(resolved_ids)
    rows = [tx for tx in transactions if tx.id not in resolved and is_sanctioned(tx, today)]

    overdue = [tx for tx in rows if tx.status == Status.BORROW_APPROVED]
    rejected = [tx for tx in rows if tx.status == Status.RETURN_REJECTED]

    overdue.sort(key=_created_key, reverse=True)
    overdue.sort(key=lambda tx: days_overdue(tx, today), reverse=True)
    rejected.sort(key=_created_key, reverse=True)
    return overdue + rejected


def resolve_sanction(
    resolved_ids: Iterable[str], transaction_id: str, sanctions: Iterable[Transaction]
) -> frozenset[str]:
    if not any(tx.id == transaction_id for tx in sanctions):
        raise NotFoundError("Transaction is not in the sanction view", transaction_id=transaction_id)
    return frozenset(resolved_ids) | {transaction_id}


# -----------------------------
# Item names
# -----------------------------
def build_item_lookup(items: Iterable[Item]) -> dict[str, str]:
    return {str(item.id): item.name for item in items}


def resolve_item_name(tx: Transaction, lookup: dict[str, str] | None = None) -> str:
    name = (lookup or {}).get(str(tx.item_id)) or tx.item_name
    return name or f"Item {tx.item_id}"


# -----------------------------
# List view
# -----------------------------
def search(
    transactions: Iterable[Transaction], query: str | None, lookup: dict[str, str] | None = None
) -> list[Transaction]:
    txs = list(transactions)
    q = (query or "").strip().lower()
    if not q:
        return txs

    def _matches(tx: Transaction) -> bool:
        fields = (tx.user_name, tx.user_email, tx.user_nim, tx.item_id, resolve_item_name(tx, lookup))
        return any(q in (f or "").lower() for f in fields)

    return [tx for tx in txs if _matches(tx)]


def filter_by_status(
    transactions: Iterable[Transaction], status_filter: str = ALL_STATUSES, show_completed: bool = False
) -> list[Transaction]:
    txs = list(transactions)

    if status_filter and status_filter != ALL_STATUSES:
        wanted = Status.parse(status_filter)
        txs = [tx for tx in txs if tx.status == wanted]

    if not show_completed:
        txs = [tx for tx in txs if tx.status not in COMPLETED_STATUSES]

    return txs


def sort_by_priority(transactions: Iterable[Transaction]) -> list[Transaction]:
    txs = sorted(transactions, key=_created_key, reverse=True)
    txs.sort(key=lambda tx: STATUS_PRIORITY[tx.status])
    return txs


def list_view(
    transactions: Iterable[Transaction],
    query: str | None = "",
    status_filter: str = ALL_STATUSES,
    show_completed: bool = False,
    lookup: dict[str, str] | None = None,
) -> list[Transaction]:
    txs = search(transactions, query, lookup)
    txs = filter_by_status(txs, status_filter, show_completed)
    return sort_by_priority(txs)


def summarize(
    transactions: Iterable[Transaction], today: date, resolved_ids: Iterable[str] = ()
) -> dict[str, int]:
    txs = list(transactions)
    return {
        "borrowRequests": sum(1 for tx in txs if tx.status == Status.BORROW_PENDING),
        "returnRequests": sum(1 for tx in txs if tx.status == Status.RETURN_PENDING),
        "activeBorrows": sum(1 for tx in txs if tx.status == Status.BORROW_APPROVED),
        "overdue": sum(1 for tx in txs if is_overdue(tx, today)),
        "sanctions": len(sanction_view(txs, today, resolved_ids)),
    }


def split_duplicate_ids(transactions: Iterable[Transaction]) -> tuple[list[Transaction], list[Transaction]]:
    """First record per id is kept; later records reusing an id come back separately."""
    kept, duplicates = [], []
    seen = set()
    for tx in transactions:
        if tx.id in seen:
            duplicates.append(tx)
            continue
        seen.add(tx.id)
        kept.append(tx)
    return kept, duplicates
