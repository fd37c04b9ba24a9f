from flask import Blueprint, request, jsonify
from inventory_dashboard.services.transaction_service import TransactionService
from inventory_dashboard.utils.auth import login_required

transaction_bp = Blueprint("transactions", __name__, url_prefix="/api")


def _flag(value) -> bool:
    return str(value or "").strip().lower() in ("1", "true", "yes", "on")


@transaction_bp.get("/transactions")
@login_required
def list_transactions():
    rows = TransactionService.list_view(
        query=request.args.get("q", ""),
        status_filter=request.args.get("status", "all"),
        show_completed=_flag(request.args.get("show_completed")),
    )
    return jsonify({"success": True, "data": rows})


@transaction_bp.post("/transactions/<transaction_id>/approve")
@login_required
def approve(transaction_id: str):
    tx = TransactionService.transition(transaction_id, "approve")
    return jsonify({"success": True, "data": tx.to_dict()})


@transaction_bp.post("/transactions/<transaction_id>/reject")
@login_required
def reject(transaction_id: str):
    tx = TransactionService.transition(transaction_id, "reject")
    return jsonify({"success": True, "data": tx.to_dict()})


@transaction_bp.get("/summary")
@login_required
def summary():
    return jsonify({"success": True, "data": TransactionService.summary()})
