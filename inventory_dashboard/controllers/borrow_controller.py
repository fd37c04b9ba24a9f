from flask import Blueprint, current_app, request, jsonify
from inventory_dashboard.services.backend_client import session_client
from inventory_dashboard.utils.auth import login_required

borrow_bp = Blueprint("borrow", __name__, url_prefix="/api/borrow")


@borrow_bp.get("")
@login_required
def list_borrows():
    data = session_client().list_borrows(
        page=request.args.get("page", 1, type=int),
        limit=request.args.get("limit", current_app.config["TRANSACTION_PAGE_LIMIT"], type=int),
    )
    return jsonify({"success": True, "data": data})


@borrow_bp.post("/<borrow_id>/status")
@login_required
def set_borrow_status(borrow_id: str):
    data = request.get_json(silent=True) or {}
    result = session_client().set_borrow_status(borrow_id, data.get("status"))
    current_app.logger.info(f"[borrow] {borrow_id} -> {data.get('status')}")
    return jsonify({"success": True, "data": result})
