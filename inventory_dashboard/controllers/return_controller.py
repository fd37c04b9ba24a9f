from flask import Blueprint, current_app, request, jsonify
from inventory_dashboard.errors import ValidationError
from inventory_dashboard.services.backend_client import session_client
from inventory_dashboard.utils.auth import login_required

return_bp = Blueprint("return", __name__, url_prefix="/api/return")


@return_bp.get("")
@login_required
def list_returns():
    data = session_client().list_returns(
        page=request.args.get("page", 1, type=int),
        limit=request.args.get("limit", current_app.config["TRANSACTION_PAGE_LIMIT"], type=int),
    )
    return jsonify({"success": True, "data": data})


@return_bp.post("")
@login_required
def create_return():
    item_id = (request.form.get("itemId") or "").strip()
    borrow_date = (request.form.get("borrowDate") or "").strip()
    return_date = (request.form.get("returnDate") or "").strip()
    if not item_id or not borrow_date or not return_date:
        raise ValidationError("itemId, borrowDate, and returnDate are required")

    damaged = request.files.get("damagedItem")
    damaged_item = (damaged.filename, damaged.stream, damaged.mimetype) if damaged and damaged.filename else None

    result = session_client().create_return(item_id, borrow_date, return_date, damaged_item)
    return jsonify({"success": True, "message": "Return request created", "data": result}), 201


@return_bp.post("/<return_id>/status")
@login_required
def set_return_status(return_id: str):
    data = request.get_json(silent=True) or {}
    result = session_client().set_return_status(return_id, data.get("status"))
    current_app.logger.info(f"[return] {return_id} -> {data.get('status')}")
    return jsonify({"success": True, "data": result})
