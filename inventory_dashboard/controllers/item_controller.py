# inventory_dashboard/controllers/item_controller.py

from flask import Blueprint, current_app, request, jsonify
from inventory_dashboard.services.item_service import ItemService
from inventory_dashboard.utils.auth import login_required

item_bp = Blueprint("items", __name__, url_prefix="/api/items")


@item_bp.get("")
@login_required
def list_items():
    items = ItemService.list_items(
        page=request.args.get("page", 1, type=int),
        limit=request.args.get("limit", current_app.config["ITEM_PAGE_LIMIT"], type=int),
        query=request.args.get("q", ""),
    )
    return jsonify({"success": True, "data": [i.to_dict() for i in items]})


@item_bp.post("")
@login_required
def create_item():
    data = request.get_json(silent=True) or {}
    created = ItemService.create_item(data)
    return jsonify({"success": True, "message": "Item created", "data": created}), 201


@item_bp.get("/<item_id>")
@login_required
def get_item(item_id: str):
    return jsonify({"success": True, "data": ItemService.get_item(item_id).to_dict()})


@item_bp.put("/<item_id>")
@login_required
def update_item(item_id: str):
    data = request.get_json(silent=True) or {}
    updated = ItemService.update_item(item_id, data)
    return jsonify({"success": True, "message": "Item updated", "data": updated})


@item_bp.delete("/<item_id>")
@login_required
def delete_item(item_id: str):
    ItemService.delete_item(item_id)
    return jsonify({"success": True, "message": "Item deleted"})
