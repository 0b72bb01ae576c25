from dataclasses import dataclass


@dataclass(frozen=True)
class Transaction:
    id: int
    kind: str
    amount: float
    description: str
    category: str
    date_display: str
    created_at: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind,
            "amount": self.amount,
            "description": self.description,
            "category": self.category,
            "dateDisplay": self.date_display,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        return cls(
            id=int(data["id"]),
            kind=str(data["kind"]),
            amount=float(data["amount"]),
            description=str(data["description"]),
            category=str(data["category"]),
            date_display=str(data["dateDisplay"]),
            created_at=int(data["createdAt"]),
        )


@dataclass(frozen=True)
class Totals:
    balance: float
    total_income: float
    total_expense: float


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    total: float
