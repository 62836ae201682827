import copy
from unittest.mock import MagicMock

import pytest
from pymongo.errors import DuplicateKeyError

from splitboard import create_app
from splitboard.config import Config
from splitboard.core import ExpenseSyncService
from splitboard.expenses.models import ExpenseStore
from splitboard.splitwise.client import SplitwiseService
from splitboard.splitwise.schemas import Expense


class FakeCursor:
    """Sorts on full documents and applies the projection only when iterated, like a server cursor."""

    def __init__(self, docs, projection=None):
        self._docs = docs
        self._projection = projection

    def sort(self, keys):
        # apply the least significant key first so the sorts compose;
        # missing fields sort lowest, as in MongoDB
        for key, direction in reversed(keys):
            self._docs.sort(key=lambda d: (key in d, d.get(key)), reverse=direction < 0)
        return self

    def limit(self, n):
        self._docs = self._docs[:n]
        return self

    def __iter__(self):
        return iter([FakeCollection._project(d, self._projection) for d in self._docs])


class FakeCollection:
    """Just enough of a pymongo collection for ExpenseStore, with a unique index on ``id``."""

    def __init__(self):
        self.docs = []
        self.indexes = []
        self.inserts = 0

    def create_index(self, keys, unique=False, name=None):
        self.indexes.append({"keys": keys, "unique": unique, "name": name})
        return name

    @staticmethod
    def _project(doc, projection):
        hidden = {k for k, v in (projection or {}).items() if not v}
        return {k: copy.deepcopy(v) for k, v in doc.items() if k not in hidden}

    @staticmethod
    def _matches(doc, query):
        return all(doc.get(k) == v for k, v in query.items())

    def find_one(self, query, projection=None):
        for doc in self.docs:
            if self._matches(doc, query):
                return self._project(doc, projection)
        return None

    def find(self, query, projection=None):
        return FakeCursor([d for d in self.docs if self._matches(d, query)], projection)

    def insert_one(self, document):
        if any(d["id"] == document["id"] for d in self.docs):
            raise DuplicateKeyError(f"E11000 duplicate key error: id {document['id']}")
        self.inserts += 1
        document["_id"] = self.inserts
        self.docs.append(document)

    def count_documents(self, query):
        return sum(1 for d in self.docs if self._matches(d, query))


def make_share(user_id, first, last, paid, owed):
    return {
        "user": {"id": user_id, "first_name": first, "last_name": last, "picture": {"medium": ""}},
        "user_id": user_id,
        "paid_share": paid,
        "owed_share": owed,
        "net_balance": f"{float(paid) - float(owed):.2f}",
    }


def make_expense(expense_id, group_id=42, description=None, cost="30.00", currency="CAD", users=None):
    if users is None:
        users = [
            make_share(1, "Ada", "Lovelace", cost, "15.00"),
            make_share(2, "Alan", "Turing", "0.00", "15.00"),
        ]
    return {
        "id": expense_id,
        "group_id": group_id,
        "description": description or f"Expense {expense_id}",
        "cost": cost,
        "currency_code": currency,
        "date": "2024-05-01T18:00:00Z",
        "created_at": "2024-05-01T18:01:00Z",
        "created_by": {"id": 1, "first_name": "Ada", "last_name": "Lovelace"},
        "category": {"id": 15, "name": "General"},
        "repayments": [{"from": 2, "to": 1, "amount": "15.00"}],
        "users": users,
    }


def make_group(group_id=42, name="Flatmates"):
    return {
        "id": group_id,
        "name": name,
        "members": [
            {"id": 1, "first_name": "Ada", "last_name": "Lovelace",
             "balance": [{"currency_code": "CAD", "amount": "15.0"}, {"currency_code": "USD", "amount": "-3.5"}]},
            {"id": 2, "first_name": "Alan", "last_name": None,
             "balance": [{"currency_code": "CAD", "amount": "-15.0"}]},
            {"id": 3, "first_name": "Grace", "last_name": "Hopper", "balance": []},
        ],
    }


class TestConfig(Config):
    __test__ = False

    SPLITWISE_API_KEY = "test-key"
    SPLITWISE_BASE_URL = "https://splitwise.test/api/v3.0"
    DISCORD_WEBHOOK_URL = "https://discord.test/webhook"
    NOTIFICATIONS_ENABLED = True
    MONGO_URI = "mongodb://localhost:27017/splitboard-test"
    DASHBOARD_URL = "https://dashboard.test/"
    CACHE_MAX_AGE = 1800
    LOCALES = ["en", "zh"]


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def store(collection):
    return ExpenseStore(collection=collection)


@pytest.fixture
def client():
    """Upstream client double serving the raw payloads in ``client.payloads``."""
    mock = MagicMock(spec=SplitwiseService)
    mock.payloads = []
    mock.fetch_expenses.side_effect = lambda group_id, limit=10: [
        Expense.from_payload(p) for p in mock.payloads[:limit]
    ]
    return mock


@pytest.fixture
def notifier():
    mock = MagicMock()
    mock.send.return_value = True
    return mock


@pytest.fixture
def sync_service(client, store, notifier):
    return ExpenseSyncService(client, store, notifier, limit=10, dashboard_url="https://dashboard.test/")


@pytest.fixture
def app(client, store, notifier, sync_service):
    return create_app(
        TestConfig,
        services={"client": client, "store": store, "notifier": notifier, "sync": sync_service},
    )


@pytest.fixture
def http(app):
    return app.test_client()
