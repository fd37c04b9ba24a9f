from datetime import date

from flask import current_app, session

from inventory_dashboard.errors import NotFoundError, ValidationError
from inventory_dashboard.models.sanction_resolution import SanctionResolution
from inventory_dashboard.models.transaction import Item, Leg, Transaction
from inventory_dashboard.repositories.sanction_repo import SanctionRepo
from inventory_dashboard.services import lifecycle_service as lifecycle
from inventory_dashboard.services.backend_client import InventoryBackendClient, session_client


class TransactionService:
    @staticmethod
    def _tz() -> str:
        return current_app.config.get("APP_TIMEZONE", "UTC")

    @staticmethod
    def today() -> date:
        return lifecycle.today_in(TransactionService._tz())

    @staticmethod
    def _fetch_all(fetch, limit: int, what: str) -> list:
        """Walk pages until the backend returns a short one."""
        max_pages = current_app.config.get("BACKEND_MAX_PAGES", 50)
        rows = []
        for page in range(1, max_pages + 1):
            batch = fetch(page=page, limit=limit)
            rows += batch
            if len(batch) < limit:
                return rows
        current_app.logger.warning(
            f"[transactions] {what}: stopped after {max_pages} pages of {limit}; later records are not loaded"
        )
        return rows

    @staticmethod
    def _parse_leg(rows: list, leg: Leg, tz: str) -> list[Transaction]:
        txs = []
        for data in rows:
            if not isinstance(data, dict):
                current_app.logger.warning(f"[transactions] Skipping {leg.value} record that is not an object: {data!r}")
                continue
            try:
                txs.append(Transaction.from_api(data, leg, tz))
            except ValidationError as e:
                current_app.logger.warning(
                    f"[transactions] Skipping {leg.value} record id={data.get('id')!r}: {e.message}"
                )
        return txs

    @staticmethod
    def load_transactions(client: InventoryBackendClient | None = None) -> list[Transaction]:
        """
        Both legs from the backend as one set of Transaction records.
        Records that do not parse are skipped and logged, as are later records
        reusing an id already seen.
        """
        client = client or session_client()
        limit = current_app.config.get("TRANSACTION_PAGE_LIMIT", 100)
        tz = TransactionService._tz()

        borrows = TransactionService._fetch_all(client.list_borrows, limit, "borrow")
        returns = TransactionService._fetch_all(client.list_returns, limit, "return")
        txs = TransactionService._parse_leg(borrows, Leg.BORROW, tz)
        txs += TransactionService._parse_leg(returns, Leg.RETURN, tz)

        txs, duplicates = lifecycle.split_duplicate_ids(txs)
        for tx in duplicates:
            current_app.logger.warning(f"[transactions] Skipping {tx.leg.value} record id={tx.id!r}: duplicate id")
        return txs

    @staticmethod
    def load_item_lookup(client: InventoryBackendClient | None = None) -> dict[str, str]:
        client = client or session_client()
        rows = TransactionService._fetch_all(
            client.list_items, current_app.config.get("TRANSACTION_PAGE_LIMIT", 100), "item"
        )
        items = []
        for data in rows:
            if not isinstance(data, dict):
                current_app.logger.warning(f"[transactions] Skipping item that is not an object: {data!r}")
                continue
            try:
                items.append(Item.from_api(data))
            except ValidationError as e:
                current_app.logger.warning(f"[transactions] Skipping item id={data.get('id')!r}: {e.message}")
        return lifecycle.build_item_lookup(items)

    @staticmethod
    def _row(tx: Transaction, lookup: dict[str, str], today: date) -> dict:
        days, _past_due = lifecycle.overdue_status(tx, today)
        row = tx.to_dict()
        row["itemName"] = lifecycle.resolve_item_name(tx, lookup)
        row["daysRemaining"] = lifecycle.days_remaining(tx, today)
        row["days"] = days
        row["isOverdue"] = lifecycle.is_overdue(tx, today)
        return row

    @staticmethod
    def list_view(query: str = "", status_filter: str = lifecycle.ALL_STATUSES,
                  show_completed: bool = False) -> list[dict]:
        client = session_client()
        txs = TransactionService.load_transactions(client)
        lookup = TransactionService.load_item_lookup(client)
        today = TransactionService.today()

        rows = lifecycle.list_view(txs, query, status_filter, show_completed, lookup)
        return [TransactionService._row(tx, lookup, today) for tx in rows]

    @staticmethod
    def sanctions() -> list[dict]:
        client = session_client()
        txs = TransactionService.load_transactions(client)
        lookup = TransactionService.load_item_lookup(client)
        today = TransactionService.today()

        rows = []
        for tx in lifecycle.sanction_view(txs, today, SanctionRepo.resolved_ids()):
            row = TransactionService._row(tx, lookup, today)
            row["daysOverdue"] = lifecycle.days_overdue(tx, today)
            row["reason"] = "overdue" if lifecycle.is_overdue(tx, today) else "return-rejected"
            rows.append(row)
        return rows

    @staticmethod
    def transition(transaction_id: str, action: str) -> Transaction:
        """
        Check the transition against the lifecycle table, then send it to the
        backend. The returned record is the locally applied result.
        """
        client = session_client()
        txs = TransactionService.load_transactions(client)
        tx = next((t for t in txs if t.id == transaction_id), None)
        if tx is None:
            raise NotFoundError("Transaction not found", transaction_id=transaction_id)

        intent = lifecycle.transition_intent(tx, action)
        client.set_status(intent.leg.value, intent.transaction_id, intent.status)

        current_app.logger.info(
            f"[transactions] {tx.id}: {tx.status.value} -> {intent.target.value} by nim={session.get('nim')}"
        )
        return lifecycle.apply_transition(tx, action)

    @staticmethod
    def resolve_sanction(transaction_id: str, note: str | None = None) -> SanctionResolution:
        client = session_client()
        txs = TransactionService.load_transactions(client)
        resolved = SanctionRepo.resolved_ids()
        sanctions = lifecycle.sanction_view(txs, TransactionService.today(), resolved)

        # raises NotFoundError when the id is not an open sanction
        lifecycle.resolve_sanction(resolved, transaction_id, sanctions)

        forwarded = client.resolve_sanction(transaction_id)
        if not forwarded:
            current_app.logger.warning(
                f"[sanctions] No backend resolution endpoint; {transaction_id} resolved locally only"
            )

        row = SanctionResolution(
            transaction_id=transaction_id,
            resolved_by=session.get("nim"),
            note=(note or None),
            forwarded=forwarded,
        )
        SanctionRepo.create(row)
        current_app.logger.info(f"[sanctions] Resolved {transaction_id} forwarded={forwarded}")
        return row

    @staticmethod
    def summary() -> dict:
        txs = TransactionService.load_transactions()
        return lifecycle.summarize(txs, TransactionService.today(), SanctionRepo.resolved_ids())
