# inventory_dashboard/tasks/overdue_check.py
from datetime import date

from flask import current_app

from inventory_dashboard.extensions import db
from inventory_dashboard.models.transaction import Status
from inventory_dashboard.repositories.notification_repo import NotificationRepo
from inventory_dashboard.repositories.sanction_repo import SanctionRepo
from inventory_dashboard.services import lifecycle_service as lifecycle
from inventory_dashboard.services.backend_client import InventoryBackendClient
from inventory_dashboard.services.mail_service import MailService
from inventory_dashboard.services.transaction_service import TransactionService


def check_overdue(client: InventoryBackendClient, today: date | None = None) -> dict:
    """
    Mails borrowers whose items are overdue or due soon and logs each attempt.
    - overdue: open sanctions that are overdue borrow-approved records
    - due_soon: borrow-approved records due within DUE_SOON_DAYS
    A transaction gets at most one successful mail per type per day.
    """
    today = today or TransactionService.today()
    due_soon_days = current_app.config.get("DUE_SOON_DAYS", 1)

    txs = TransactionService.load_transactions(client)
    lookup = TransactionService.load_item_lookup(client)

    overdue_rows = [
        tx for tx in lifecycle.sanction_view(txs, today, SanctionRepo.resolved_ids())
        if lifecycle.is_overdue(tx, today)
    ]
    due_soon_rows = [
        tx for tx in txs
        if tx.status == Status.BORROW_APPROVED and 0 <= lifecycle.days_remaining(tx, today) <= due_soon_days
    ]

    mail_overdue_sent = 0
    mail_due_soon_sent = 0
    skipped = 0

    try:
        for tx in overdue_rows:
            if NotificationRepo.already_sent(tx.id, "overdue_mail", today):
                skipped += 1
                continue
            if MailService.send_overdue_mail(
                tx, lifecycle.resolve_item_name(tx, lookup), lifecycle.days_overdue(tx, today), today
            ):
                mail_overdue_sent += 1

        for tx in due_soon_rows:
            if NotificationRepo.already_sent(tx.id, "due_soon_mail", today):
                skipped += 1
                continue
            if MailService.send_due_soon_mail(
                tx, lifecycle.resolve_item_name(tx, lookup), lifecycle.days_remaining(tx, today), today
            ):
                mail_due_soon_sent += 1

        # single commit for the whole batch of logs
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    summary = {
        "overdue": len(overdue_rows),
        "dueSoon": len(due_soon_rows),
        "mailOverdueSent": mail_overdue_sent,
        "mailDueSoonSent": mail_due_soon_sent,
        "skipped": skipped,
    }
    current_app.logger.info(
        f"[overdue_check] overdue={summary['overdue']} due_soon={summary['dueSoon']} "
        f"mail_overdue_sent={mail_overdue_sent} mail_due_soon_sent={mail_due_soon_sent} skipped={skipped}"
    )
    return summary


def run_overdue_check_job(app, today: date | None = None):
    """
    Scheduled entry point: logs in with the service credential and runs
    check_overdue. Failures are logged; the job never raises.
    """
    with app.app_context():
        nim = app.config.get("SERVICE_NIM")
        password = app.config.get("SERVICE_PASSWORD")
        if not nim or not password:
            current_app.logger.warning("[overdue_check] SERVICE_NIM/SERVICE_PASSWORD not set, skipped.")
            return None

        try:
            client = InventoryBackendClient.from_config(app.config)
            client.access_token = client.login(nim, password).get("accessToken")
            return check_overdue(client, today)
        except Exception as e:
            current_app.logger.exception(f"[overdue_check] Error: {e}")
            return None
