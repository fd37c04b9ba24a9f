from flask import Blueprint, jsonify
from inventory_dashboard.repositories.notification_repo import NotificationRepo
from inventory_dashboard.services.backend_client import session_client
from inventory_dashboard.tasks.overdue_check import check_overdue
from inventory_dashboard.utils.auth import login_required

notif_bp = Blueprint("notifications", __name__, url_prefix="/api/notifications")


@notif_bp.get("")
@login_required
def list_notifications():
    rows = NotificationRepo.list_recent()
    return jsonify({"success": True, "data": [
        {
            "id": n.id,
            "transactionId": n.transaction_id,
            "type": n.type,
            "email": n.email,
            "success": bool(n.success),
            "error": n.error_message,
            "reminderDate": n.reminder_date.isoformat(),
            "sentAt": n.sent_at.isoformat(),
        } for n in rows
    ]})


@notif_bp.post("/run-overdue-check")
@login_required
def run_overdue_check():
    summary = check_overdue(session_client())
    return jsonify({"success": True, "message": "Overdue check completed", "data": summary})
