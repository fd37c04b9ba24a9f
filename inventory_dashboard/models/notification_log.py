# inventory_dashboard/models/notification_log.py
from datetime import datetime
from inventory_dashboard.extensions import db


class NotificationLog(db.Model):
    __tablename__ = "notification_logs"

    id = db.Column(db.Integer, primary_key=True)

    transaction_id = db.Column(db.String(64), nullable=False, index=True)

    # overdue_mail / due_soon_mail
    type = db.Column(db.String(50), nullable=False, default="overdue_mail")

    email = db.Column(db.String(255), nullable=True)
    message = db.Column(db.String(1000), nullable=True)

    # reference day the reminder was for; one reminder per type per day
    reminder_date = db.Column(db.Date, nullable=False, index=True)

    sent_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    success = db.Column(db.Boolean, nullable=False, default=True)
    error_message = db.Column(db.String(500), nullable=True)
