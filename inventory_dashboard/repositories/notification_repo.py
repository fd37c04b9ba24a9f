from datetime import date

from inventory_dashboard.extensions import db
from inventory_dashboard.models.notification_log import NotificationLog


class NotificationRepo:
    @staticmethod
    def already_sent(transaction_id: str, notif_type: str, day: date) -> bool:
        return NotificationLog.query.filter_by(
            transaction_id=transaction_id,
            type=notif_type,
            reminder_date=day,
            success=True,
        ).first() is not None

    @staticmethod
    def list_recent(limit: int = 50):
        return NotificationLog.query.order_by(NotificationLog.id.desc()).limit(limit).all()

    @staticmethod
    def log(entry: NotificationLog):
        db.session.add(entry)
        return entry
