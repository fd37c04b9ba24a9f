# inventory_dashboard/services/mail_service.py
from __future__ import annotations

from datetime import date

from flask import current_app
from flask_mail import Message

from inventory_dashboard.extensions import mail
from inventory_dashboard.models.notification_log import NotificationLog
from inventory_dashboard.models.transaction import Transaction
from inventory_dashboard.repositories.notification_repo import NotificationRepo


class MailService:
    @staticmethod
    def send_email(to_email: str, subject: str, body: str) -> tuple[bool, str | None]:
        """
        return: (success, error_text)
        """
        try:
            msg = Message(subject=subject, recipients=[to_email], body=body)
            mail.send(msg)
            return True, None
        except Exception as e:
            current_app.logger.warning(f"[MailService] Mail could not be sent to {to_email}: {e}")
            return False, str(e)

    @staticmethod
    def log_notification(
        transaction_id: str,
        notif_type: str,
        to_email: str | None,
        message: str,
        success: bool,
        reminder_date: date,
        error: str | None = None,
    ) -> NotificationLog:
        # caller commits once for the whole batch
        return NotificationRepo.log(NotificationLog(
            transaction_id=transaction_id,
            type=notif_type,
            email=to_email,
            message=message,
            success=bool(success),
            error_message=error,
            reminder_date=reminder_date,
        ))

    @staticmethod
    def _send_and_log(tx: Transaction, notif_type: str, subject: str, body: str, today: date) -> bool:
        if not tx.user_email:
            MailService.log_notification(
                transaction_id=tx.id,
                notif_type=notif_type,
                to_email=None,
                message="User email not found",
                success=False,
                reminder_date=today,
                error="missing_email",
            )
            return False

        ok, err = MailService.send_email(tx.user_email, subject, body)
        MailService.log_notification(
            transaction_id=tx.id,
            notif_type=notif_type,
            to_email=tx.user_email,
            message="Mail sent" if ok else "Mail could not be sent",
            success=ok,
            reminder_date=today,
            error=err,
        )
        return ok

    @staticmethod
    def send_overdue_mail(tx: Transaction, item_name: str, days_overdue: int, today: date) -> bool:
        body = (
            f"Hello {tx.user_name or 'borrower'},\n\n"
            f"'{item_name}' was due back on {tx.return_date.isoformat()} "
            f"and is now {days_overdue} day(s) overdue.\n\n"
            f"Please return it as soon as possible.\n"
        )
        return MailService._send_and_log(tx, "overdue_mail", "Inventory: overdue item", body, today)

    @staticmethod
    def send_due_soon_mail(tx: Transaction, item_name: str, days_left: int, today: date) -> bool:
        body = (
            f"Hello {tx.user_name or 'borrower'},\n\n"
            f"'{item_name}' is due back on {tx.return_date.isoformat()} "
            f"({days_left} day(s) left).\n\n"
            f"Don't forget to return it.\n"
        )
        return MailService._send_and_log(tx, "due_soon_mail", "Inventory: return date approaching", body, today)
