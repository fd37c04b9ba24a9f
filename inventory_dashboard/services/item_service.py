from inventory_dashboard.errors import ValidationError
from inventory_dashboard.models.transaction import Item
from inventory_dashboard.services.backend_client import session_client


class ItemService:
    @staticmethod
    def _parse_payload(data: dict) -> tuple[str, int]:
        name = (data.get("name") or "").strip()
        quantity = data.get("quantity")
        if not name or quantity is None or quantity == "":
            raise ValidationError("Name and quantity are required")
        try:
            quantity = int(quantity)
        except (TypeError, ValueError):
            raise ValidationError("quantity must be an integer", quantity=str(quantity))
        if quantity < 0:
            raise ValidationError("quantity must be >= 0", quantity=quantity)
        return name, quantity

    @staticmethod
    def list_items(page: int = 1, limit: int = 10, query: str = "") -> list[Item]:
        items = [Item.from_api(x) for x in session_client().list_items(page=page, limit=limit)]

        q = (query or "").strip().lower()
        if q:
            items = [i for i in items if q in i.name.lower() or q in i.id.lower()]
        return items

    @staticmethod
    def get_item(item_id: str) -> Item:
        return Item.from_api(session_client().get_item(item_id) or {"id": item_id})

    @staticmethod
    def create_item(data: dict) -> dict:
        name, quantity = ItemService._parse_payload(data)
        return session_client().create_item(name, quantity)

    @staticmethod
    def update_item(item_id: str, data: dict) -> dict:
        name, quantity = ItemService._parse_payload(data)
        return session_client().update_item(item_id, name, quantity)

    @staticmethod
    def delete_item(item_id: str):
        return session_client().delete_item(item_id)
