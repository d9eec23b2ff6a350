"""
Record types read by the weekly reporting code.

Rows come out of SQLite as sqlite3.Row; from_row() turns them into
plain dataclasses so the aggregation code never touches the database.
"""

from dataclasses import dataclass

# Commission share applied when an employee has no stored percentage.
# Every commission figure in the app (dashboard, employee page, public page)
# goes through this one value.
DEFAULT_COMMISSION_PERCENT = 40

PAYMENT_METHODS = ("pix", "cash")


@dataclass(frozen=True)
class Employee:
    id: str
    name: str
    is_active: bool = True
    commission_percent: float | None = None
    email: str | None = None
    phone: str | None = None
    user_id: str | None = None
    created_at: str | None = None

    @property
    def effective_commission_percent(self) -> float:
        if self.commission_percent is None:
            return DEFAULT_COMMISSION_PERCENT
        return self.commission_percent

    @classmethod
    def from_row(cls, row) -> "Employee":
        keys = row.keys()
        return cls(
            id=row["id"],
            name=row["name"],
            is_active=bool(row["is_active"]),
            commission_percent=row["commission_percent"] if "commission_percent" in keys else None,
            email=row["email"] if "email" in keys else None,
            phone=row["phone"] if "phone" in keys else None,
            user_id=row["user_id"] if "user_id" in keys else None,
            created_at=row["created_at"] if "created_at" in keys else None,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "is_active": self.is_active,
            "commission_percent": self.effective_commission_percent,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class WashJob:
    """A lavagem: one wash performed by one employee."""

    id: str
    employee_id: str
    description: str
    price: float
    performed_on: str
    payment_method: str | None = None
    created_at: str | None = None
    employee_name: str | None = None

    @classmethod
    def from_row(cls, row) -> "WashJob":
        keys = row.keys()
        return cls(
            id=row["id"],
            employee_id=row["employee_id"],
            description=row["description"],
            price=row["price"] or 0.0,
            performed_on=row["performed_on"],
            payment_method=row["payment_method"] if "payment_method" in keys else None,
            created_at=row["created_at"] if "created_at" in keys else None,
            employee_name=row["employee_name"] if "employee_name" in keys else None,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "description": self.description,
            "price": self.price,
            "performed_on": self.performed_on,
            "payment_method": self.payment_method,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class Expense:
    """A despesa: an operating cost paid by the business."""

    id: str
    description: str
    amount: float
    incurred_on: str
    notes: str | None = None
    created_at: str | None = None

    @classmethod
    def from_row(cls, row) -> "Expense":
        keys = row.keys()
        return cls(
            id=row["id"],
            description=row["description"],
            amount=row["amount"] or 0.0,
            incurred_on=row["incurred_on"],
            notes=row["notes"] if "notes" in keys else None,
            created_at=row["created_at"] if "created_at" in keys else None,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "description": self.description,
            "amount": self.amount,
            "incurred_on": self.incurred_on,
            "notes": self.notes,
            "created_at": self.created_at,
        }
