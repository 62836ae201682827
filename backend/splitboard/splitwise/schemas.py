"""Typed views over Splitwise API payloads.

The client validates every payload into these dataclasses before handing it
on, so the rest of the app never indexes into raw JSON. Each object keeps the
original dict in ``raw`` because expenses are persisted verbatim and the groups
endpoint is proxied verbatim.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class SchemaError(ValueError):
    """A payload is missing a required field or has the wrong type."""


def _require(payload: Dict[str, Any], key: str, kind, where: str):
    if not isinstance(payload, dict):
        raise SchemaError(f"{where}: expected an object, got {type(payload).__name__}")
    if key not in payload or payload[key] is None:
        raise SchemaError(f"{where}: missing '{key}'")
    value = payload[key]
    # bool is an int subclass; never accept it where an id is expected
    if kind is int and isinstance(value, bool):
        raise SchemaError(f"{where}: '{key}' must be int")
    if not isinstance(value, kind):
        raise SchemaError(f"{where}: '{key}' must be {getattr(kind, '__name__', kind)}")
    return value


def _decimal_string(payload: Dict[str, Any], key: str, where: str) -> str:
    value = _require(payload, key, str, where)
    try:
        float(value)
    except ValueError:
        raise SchemaError(f"{where}: '{key}' is not a decimal string: {value!r}")
    return value


@dataclass
class Person:
    id: int
    first_name: str
    last_name: Optional[str] = None

    @property
    def full_name(self) -> str:
        if self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.first_name

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], where: str = "user") -> "Person":
        return cls(
            id=_require(payload, "id", int, where),
            first_name=_require(payload, "first_name", str, where),
            last_name=payload.get("last_name"),
        )


@dataclass
class Share:
    """One participant's part of an expense."""
    user: Person
    paid_share: str
    owed_share: str
    net_balance: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], where: str = "share") -> "Share":
        user = Person.from_payload(_require(payload, "user", dict, where), f"{where}.user")
        return cls(
            user=user,
            paid_share=_decimal_string(payload, "paid_share", where),
            owed_share=_decimal_string(payload, "owed_share", where),
            net_balance=payload.get("net_balance"),
        )


@dataclass
class Expense:
    id: int
    group_id: int
    description: str
    cost: str
    currency_code: str
    date: str
    created_at: Optional[str] = None
    created_by: Optional[Person] = None
    users: List[Share] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Expense":
        expense_id = _require(payload, "id", int, "expense")
        where = f"expense {expense_id}"

        created_by = payload.get("created_by")
        users = _require(payload, "users", list, where)

        return cls(
            id=expense_id,
            group_id=_require(payload, "group_id", int, where),
            description=_require(payload, "description", str, where),
            cost=_decimal_string(payload, "cost", where),
            currency_code=_require(payload, "currency_code", str, where),
            date=_require(payload, "date", str, where),
            created_at=payload.get("created_at"),
            created_by=Person.from_payload(created_by, f"{where}.created_by") if created_by else None,
            users=[Share.from_payload(u, f"{where}.users[{i}]") for i, u in enumerate(users)],
            raw=payload,
        )


@dataclass
class Balance:
    currency_code: str
    amount: str

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], where: str = "balance") -> "Balance":
        return cls(
            currency_code=_require(payload, "currency_code", str, where),
            amount=_decimal_string(payload, "amount", where),
        )


@dataclass
class Member(Person):
    balance: List[Balance] = field(default_factory=list)

    def balance_in(self, currency: str) -> Optional[Balance]:
        for entry in self.balance:
            if entry.currency_code == currency:
                return entry
        return None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], where: str = "member") -> "Member":
        person = Person.from_payload(payload, where)
        balances = payload.get("balance") or []
        if not isinstance(balances, list):
            raise SchemaError(f"{where}: 'balance' must be list")
        return cls(
            id=person.id,
            first_name=person.first_name,
            last_name=person.last_name,
            balance=[Balance.from_payload(b, f"{where}.balance[{i}]") for i, b in enumerate(balances)],
        )


@dataclass
class Group:
    id: int
    name: str
    members: List[Member] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Group":
        group_id = _require(payload, "id", int, "group")
        where = f"group {group_id}"
        members = payload.get("members") or []
        if not isinstance(members, list):
            raise SchemaError(f"{where}: 'members' must be list")
        return cls(
            id=group_id,
            name=_require(payload, "name", str, where),
            members=[Member.from_payload(m, f"{where}.members[{i}]") for i, m in enumerate(members)],
            raw=payload,
        )
