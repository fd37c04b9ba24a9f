# inventory_dashboard/models/transaction.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from zoneinfo import ZoneInfo

from inventory_dashboard.errors import ValidationError


class Leg(str, Enum):
    BORROW = "borrow"
    RETURN = "return"


class Status(str, Enum):
    BORROW_PENDING = "borrow-pending"
    BORROW_APPROVED = "borrow-approved"
    BORROW_REJECTED = "borrow-rejected"
    RETURN_PENDING = "return-pending"
    RETURN_APPROVED = "return-approved"
    RETURN_REJECTED = "return-rejected"

    @property
    def leg(self) -> Leg:
        return Leg(self.value.split("-", 1)[0])

    @property
    def outcome(self) -> str:
        # pending / approved / rejected, as the backend names it
        return self.value.split("-", 1)[1]

    @classmethod
    def parse(cls, raw, leg: Leg | str | None = None) -> "Status":
        """
        Backend legs report bare pending/approved/rejected; the leg they were
        fetched from qualifies them. Already qualified values pass through.
        """
        if isinstance(raw, Status):
            return raw
        value = str(raw or "").strip().lower().replace("_", "-")
        try:
            return cls(value)
        except ValueError:
            pass
        if leg is not None:
            try:
                return cls(f"{Leg(leg).value}-{value}")
            except ValueError:
                pass
        raise ValidationError(f"Invalid status: {raw!r}", status=str(raw))


class Action(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


def parse_datetime(value) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"Invalid date: {value!r}", value=str(value))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def to_local_date(value, tz: str = "UTC") -> date | None:
    """Truncate a timestamp to its calendar day in the reference timezone."""
    dt = parse_datetime(value)
    if dt is None:
        return None
    return dt.astimezone(ZoneInfo(tz)).date()


def _pick(data: dict, *keys, default=None):
    for k in keys:
        if data.get(k) not in (None, ""):
            return data[k]
    return default


@dataclass(frozen=True)
class Transaction:
    id: str
    item_id: str
    borrow_date: date
    return_date: date
    status: Status
    user_id: str | None = None
    user_name: str = ""
    user_email: str = ""
    user_nim: str = ""
    user_program_study: str = ""
    item_name: str | None = None
    damaged_item: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self):
        if not self.id:
            raise ValidationError("Transaction id is required")
        if self.borrow_date is None or self.return_date is None:
            raise ValidationError("borrowDate and returnDate are required", transaction_id=self.id)
        if self.return_date < self.borrow_date:
            raise ValidationError(
                "returnDate is before borrowDate",
                transaction_id=self.id,
                borrow_date=self.borrow_date.isoformat(),
                return_date=self.return_date.isoformat(),
            )

    @property
    def leg(self) -> Leg:
        return self.status.leg

    @classmethod
    def from_api(cls, data: dict, leg: Leg | str | None = None, tz: str = "UTC") -> "Transaction":
        user = data.get("user") if isinstance(data.get("user"), dict) else {}
        item = data.get("item") if isinstance(data.get("item"), dict) else {}

        item_id = _pick(data, "itemId", "item_id") or item.get("id")
        if item_id is None:
            raise ValidationError("itemId is required", transaction_id=data.get("id"))

        return cls(
            id=str(data.get("id") or ""),
            item_id=str(item_id),
            item_name=_pick(data, "itemName") or item.get("name"),
            borrow_date=to_local_date(_pick(data, "borrowDate", "startDate"), tz),
            return_date=to_local_date(_pick(data, "returnDate", "endDate"), tz),
            status=Status.parse(data.get("status"), leg),
            user_id=_pick(data, "userId") or user.get("id"),
            user_name=_pick(data, "userName") or user.get("name") or "",
            user_email=_pick(data, "userEmail") or user.get("email") or "",
            user_nim=str(_pick(data, "userNIM", "userNim") or user.get("nim") or ""),
            user_program_study=_pick(data, "userProgramStudy") or user.get("programStudy") or "",
            damaged_item=_pick(data, "damagedItem"),
            created_at=parse_datetime(data.get("createdAt")),
            updated_at=parse_datetime(data.get("updatedAt")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "userName": self.user_name,
            "userEmail": self.user_email,
            "userNIM": self.user_nim,
            "userProgramStudy": self.user_program_study,
            "itemId": self.item_id,
            "itemName": self.item_name,
            "borrowDate": self.borrow_date.isoformat(),
            "returnDate": self.return_date.isoformat(),
            "status": self.status.value,
            "damagedItem": self.damaged_item,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class Item:
    id: str
    name: str
    quantity: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self):
        if self.quantity < 0:
            raise ValidationError("quantity must be >= 0", item_id=self.id, quantity=self.quantity)

    @classmethod
    def from_api(cls, data: dict) -> "Item":
        try:
            quantity = int(data.get("quantity") or 0)
        except (TypeError, ValueError):
            raise ValidationError("quantity must be an integer", item_id=data.get("id"))
        return cls(
            id=str(data.get("id")),
            name=data.get("name") or "",
            quantity=quantity,
            created_at=parse_datetime(data.get("createdAt")),
            updated_at=parse_datetime(data.get("updatedAt")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class TransitionIntent:
    """A status change for the surrounding layer to send as POST /{leg}/{id}/status."""

    transaction_id: str
    leg: Leg
    status: str  # approved / rejected
    target: Status
