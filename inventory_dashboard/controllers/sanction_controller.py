# inventory_dashboard/controllers/sanction_controller.py

from flask import Blueprint, request, jsonify
from inventory_dashboard.repositories.sanction_repo import SanctionRepo
from inventory_dashboard.services.transaction_service import TransactionService
from inventory_dashboard.utils.auth import login_required

sanction_bp = Blueprint("sanctions", __name__, url_prefix="/api/sanctions")


@sanction_bp.get("")
@login_required
def list_sanctions():
    return jsonify({"success": True, "data": TransactionService.sanctions()})


@sanction_bp.get("/resolved")
@login_required
def list_resolved():
    rows = SanctionRepo.list_all()
    return jsonify({
        "success": True,
        "data": [
            {
                "transactionId": r.transaction_id,
                "resolvedBy": r.resolved_by,
                "note": r.note,
                "forwarded": bool(r.forwarded),
                "resolvedAt": r.resolved_at.isoformat(),
            }
            for r in rows
        ]
    })


@sanction_bp.post("/<transaction_id>/resolve")
@login_required
def resolve(transaction_id: str):
    data = request.get_json(silent=True) or {}
    row = TransactionService.resolve_sanction(transaction_id, (data.get("note") or "").strip())
    return jsonify({
        "success": True,
        "message": "Sanction resolved" if row.forwarded else "Sanction resolved locally",
        "data": {"transactionId": row.transaction_id, "forwarded": bool(row.forwarded)},
    })
