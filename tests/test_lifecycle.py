from dataclasses import replace
from datetime import date, datetime, timedelta, timezone

import pytest

from inventory_dashboard.errors import ConflictError, NotFoundError, ValidationError
from inventory_dashboard.models.transaction import Item, Leg, Status, Transaction
from inventory_dashboard.services import lifecycle_service as lifecycle

TODAY = date(2025, 6, 20)
CREATED = datetime(2025, 6, 1, 9, 0, tzinfo=timezone.utc)


def make_tx(id="t1", status=Status.BORROW_PENDING, due=TODAY + timedelta(days=5),
            created=CREATED, **kw):
    defaults = dict(
        id=id,
        item_id="item-1",
        borrow_date=date(2025, 6, 1),
        return_date=due,
        status=status,
        user_id="u1",
        user_name="John Doe",
        user_email="john@example.com",
        user_nim="1301200001",
        created_at=created,
        updated_at=created,
    )
    defaults.update(kw)
    return Transaction(**defaults)


# -----------------------------
# Transitions
# -----------------------------
@pytest.mark.parametrize("start, action, target", [
    (Status.BORROW_PENDING, "approve", Status.BORROW_APPROVED),
    (Status.BORROW_PENDING, "reject", Status.BORROW_REJECTED),
    (Status.RETURN_PENDING, "approve", Status.RETURN_APPROVED),
    (Status.RETURN_PENDING, "reject", Status.RETURN_REJECTED),
])
def test_valid_transition_changes_only_status_and_updated_at(start, action, target):
    tx = make_tx(status=start)
    now = datetime(2025, 6, 20, 12, 0, tzinfo=timezone.utc)

    moved = lifecycle.apply_transition(tx, action, now)

    assert moved.status == target
    assert moved.updated_at == now
    assert replace(moved, status=tx.status, updated_at=tx.updated_at) == tx


@pytest.mark.parametrize("start, action", [
    (Status.RETURN_APPROVED, "approve"),
    (Status.BORROW_APPROVED, "approve"),
    (Status.BORROW_REJECTED, "approve"),
    (Status.RETURN_REJECTED, "reject"),
    (Status.BORROW_APPROVED, "reject"),
])
def test_undefined_transition_raises_conflict(start, action):
    tx = make_tx(status=start)

    with pytest.raises(ConflictError) as exc:
        lifecycle.apply_transition(tx, action)

    assert exc.value.context["transaction_id"] == "t1"
    assert exc.value.context["status"] == start.value
    assert exc.value.context["action"] == action
    assert tx.status == start


def test_unknown_action_is_a_validation_error():
    with pytest.raises(ValidationError):
        lifecycle.apply_transition(make_tx(), "cancel")


def test_transition_intent_targets_the_leg_endpoint():
    intent = lifecycle.transition_intent(make_tx(id="r9", status=Status.RETURN_PENDING), "reject")

    assert intent.transaction_id == "r9"
    assert intent.leg == Leg.RETURN
    assert intent.status == "rejected"
    assert intent.target == Status.RETURN_REJECTED


# -----------------------------
# Overdue
# -----------------------------
def test_due_yesterday_is_one_day_overdue():
    tx = make_tx(status=Status.BORROW_APPROVED, due=TODAY - timedelta(days=1))

    assert lifecycle.is_overdue(tx, TODAY) is True
    assert lifecycle.days_overdue(tx, TODAY) == 1
    assert lifecycle.overdue_status(tx, TODAY) == (1, True)


def test_due_today_is_not_overdue():
    tx = make_tx(status=Status.BORROW_APPROVED, due=TODAY)

    assert lifecycle.is_overdue(tx, TODAY) is False
    assert lifecycle.days_remaining(tx, TODAY) == 0
    assert lifecycle.days_overdue(tx, TODAY) == 0


def test_only_borrow_approved_records_are_overdue():
    past = TODAY - timedelta(days=4)
    for status in Status:
        tx = make_tx(status=status, due=past)
        assert lifecycle.is_overdue(tx, TODAY) is (status == Status.BORROW_APPROVED)


def test_days_remaining_for_in_flight_borrow():
    tx = make_tx(status=Status.BORROW_APPROVED, due=TODAY + timedelta(days=3))
    assert lifecycle.days_remaining(tx, TODAY) == 3
    assert lifecycle.overdue_status(tx, TODAY) == (3, False)


# -----------------------------
# Sanctions
# -----------------------------
def test_sanction_view_puts_overdue_before_rejected_returns():
    overdue = make_tx(id="late", status=Status.BORROW_APPROVED, due=TODAY - timedelta(days=3),
                      created=CREATED + timedelta(days=2))
    rejected = make_tx(id="rej", status=Status.RETURN_REJECTED, created=CREATED)
    fine = make_tx(id="ok", status=Status.BORROW_APPROVED, due=TODAY + timedelta(days=1))

    view = lifecycle.sanction_view([rejected, fine, overdue], TODAY)

    assert [tx.id for tx in view] == ["late", "rej"]


def test_sanction_view_orders_by_days_overdue_then_created_at():
    a = make_tx(id="a", status=Status.BORROW_APPROVED, due=TODAY - timedelta(days=2), created=CREATED)
    b = make_tx(id="b", status=Status.BORROW_APPROVED, due=TODAY - timedelta(days=7), created=CREATED)
    c = make_tx(id="c", status=Status.BORROW_APPROVED, due=TODAY - timedelta(days=2),
                created=CREATED + timedelta(hours=1))
    r1 = make_tx(id="r1", status=Status.RETURN_REJECTED, created=CREATED)
    r2 = make_tx(id="r2", status=Status.RETURN_REJECTED, created=CREATED + timedelta(days=1))

    view = lifecycle.sanction_view([a, r1, b, c, r2], TODAY)

    assert [tx.id for tx in view] == ["b", "c", "a", "r2", "r1"]


def test_resolving_a_sanction_removes_only_that_record():
    late = make_tx(id="late", status=Status.BORROW_APPROVED, due=TODAY - timedelta(days=3))
    rej = make_tx(id="rej", status=Status.RETURN_REJECTED)
    txs = [late, rej]

    sanctions = lifecycle.sanction_view(txs, TODAY)
    resolved = lifecycle.resolve_sanction(frozenset(), "rej", sanctions)

    assert resolved == {"rej"}
    assert [tx.id for tx in lifecycle.sanction_view(txs, TODAY, resolved)] == ["late"]


def test_resolving_an_unknown_sanction_raises():
    with pytest.raises(NotFoundError):
        lifecycle.resolve_sanction(frozenset(), "missing", [])


# -----------------------------
# List view
# -----------------------------
def test_search_is_case_insensitive_on_user_name():
    john = make_tx(id="j", user_name="John Doe")
    jane = make_tx(id="n", user_name="Jane", user_email="jane@example.com", user_nim="999")

    assert [tx.id for tx in lifecycle.search([john, jane], "john")] == ["j"]


def test_search_matches_resolved_item_name_and_ignores_blank_query():
    drill = make_tx(id="d", item_id="item-7")
    other = make_tx(id="o", item_id="item-8", user_name="Jane", user_email="jane@x.io", user_nim="2")
    lookup = {"item-7": "Cordless Drill"}

    assert [tx.id for tx in lifecycle.search([drill, other], "DRILL", lookup)] == ["d"]
    assert len(lifecycle.search([drill, other], "   ", lookup)) == 2


def test_hiding_completed_keeps_borrow_approved():
    txs = [make_tx(id=s.value, status=s) for s in Status]

    visible = lifecycle.filter_by_status(txs, "all", show_completed=False)

    assert {tx.status for tx in visible} == {
        Status.BORROW_PENDING, Status.RETURN_PENDING, Status.BORROW_APPROVED,
    }
    assert len(lifecycle.filter_by_status(txs, "all", show_completed=True)) == 6


def test_status_filter_matches_exactly_and_rejects_unknown_values():
    txs = [make_tx(id=s.value, status=s) for s in Status]

    only = lifecycle.filter_by_status(txs, "return-pending")
    assert [tx.status for tx in only] == [Status.RETURN_PENDING]

    with pytest.raises(ValidationError):
        lifecycle.filter_by_status(txs, "in-progress")


def test_sort_by_priority_then_newest_first():
    older = make_tx(id="older", status=Status.BORROW_PENDING, created=CREATED)
    newer = make_tx(id="newer", status=Status.BORROW_PENDING, created=CREATED + timedelta(days=1))
    ret = make_tx(id="ret", status=Status.RETURN_PENDING)
    done = make_tx(id="done", status=Status.RETURN_APPROVED)
    active = make_tx(id="active", status=Status.BORROW_APPROVED)

    ordered = lifecycle.sort_by_priority([done, active, older, ret, newer])

    assert [tx.id for tx in ordered] == ["newer", "older", "ret", "active", "done"]


def test_filters_commute():
    txs = [
        make_tx(id="1", status=Status.BORROW_PENDING, user_name="John"),
        make_tx(id="2", status=Status.RETURN_APPROVED, user_name="John"),
        make_tx(id="3", status=Status.BORROW_PENDING, user_name="Ann", user_email="a@x", user_nim="5"),
    ]
    a = lifecycle.filter_by_status(lifecycle.search(txs, "john"), "all", False)
    b = lifecycle.search(lifecycle.filter_by_status(txs, "all", False), "john")

    assert lifecycle.sort_by_priority(a) == lifecycle.sort_by_priority(b)
    assert [tx.id for tx in lifecycle.list_view(txs, "john")] == ["1"]


# -----------------------------
# Items / summary
# -----------------------------
def test_item_name_resolution_falls_back_to_placeholder():
    lookup = lifecycle.build_item_lookup([Item(id="1", name="Projector", quantity=2)])

    assert lifecycle.resolve_item_name(make_tx(item_id="1"), lookup) == "Projector"
    assert lifecycle.resolve_item_name(make_tx(item_id="42"), lookup) == "Item 42"
    assert lifecycle.resolve_item_name(make_tx(item_id="42", item_name="Tripod"), lookup) == "Tripod"


def test_summary_counts():
    txs = [
        make_tx(id="p", status=Status.BORROW_PENDING),
        make_tx(id="r", status=Status.RETURN_PENDING),
        make_tx(id="a", status=Status.BORROW_APPROVED),
        make_tx(id="l", status=Status.BORROW_APPROVED, due=TODAY - timedelta(days=1)),
        make_tx(id="x", status=Status.RETURN_REJECTED),
    ]

    assert lifecycle.summarize(txs, TODAY) == {
        "borrowRequests": 1,
        "returnRequests": 1,
        "activeBorrows": 2,
        "overdue": 1,
        "sanctions": 2,
    }
    assert lifecycle.summarize(txs, TODAY, {"x"})["sanctions"] == 1


def test_duplicate_ids_keep_the_first_record():
    first = make_tx(id="a")
    again = make_tx(id="a", status=Status.RETURN_REJECTED)
    other = make_tx(id="b")

    kept, duplicates = lifecycle.split_duplicate_ids([first, other, again])

    assert kept == [first, other]
    assert duplicates == [again]
