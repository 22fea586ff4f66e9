from __future__ import annotations

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from tableflow.infrastructure.db.models.catalog import AddonModel, ProductModel
from tableflow.infrastructure.db.models.table import TableModel
from tableflow.infrastructure.db.models.user import UserModel
from tableflow.infrastructure.db.session import default_currency, get_engine

REQUIRED_TABLES = {"users", "tables", "products", "adicionais"}

USERS = [
    {"id": "usr_001", "name": "Ana Souza", "email": "ana@tableflow.local"},
    {"id": "usr_002", "name": "Bruno Lima", "email": "bruno@tableflow.local"},
]

TABLES = [
    {"id": f"tbl_{number:03d}", "number": number, "capacity": capacity, "status": "FREE"}
    for number, capacity in ((1, 2), (2, 2), (3, 4), (4, 4), (5, 6), (6, 8))
]

PRODUCTS = [
    {
        "id": "prd_001",
        "name": "X-Burger",
        "description": "Beef patty, cheese, brioche bun",
        "price_cents": 2890,
        "is_available": True,
    },
    {
        "id": "prd_002",
        "name": "Batata Frita",
        "description": "Fries with sea salt",
        "price_cents": 1490,
        "is_available": True,
    },
    {
        "id": "prd_003",
        "name": "Suco de Laranja",
        "description": "Fresh orange juice",
        "price_cents": 990,
        "is_available": True,
    },
    {
        "id": "prd_004",
        "name": "Pudim",
        "description": "Condensed milk flan",
        "price_cents": 1200,
        "is_available": False,
    },
]

ADDONS = [
    {"id": "add_001", "name": "Bacon", "description": "Crispy bacon strips", "price_cents": 450},
    {"id": "add_002", "name": "Cheddar", "description": "Extra cheddar slice", "price_cents": 350},
    {"id": "add_003", "name": "Ovo", "description": "Fried egg", "price_cents": 300},
]


def seed(session: Session, currency: str) -> None:
    # merge keeps the seed idempotent on both Postgres and SQLite.
    for user in USERS:
        session.merge(UserModel(**user))
    for table in TABLES:
        session.merge(TableModel(assigned_to=None, **table))
    for product in PRODUCTS:
        session.merge(ProductModel(currency=currency, **product))
    for addon in ADDONS:
        session.merge(AddonModel(currency=currency, **addon))


def main() -> None:
    engine = get_engine(timeout_seconds=2.0)
    inspector = inspect(engine)
    if not REQUIRED_TABLES.issubset(set(inspector.get_table_names())):
        print("no schema yet")
        return

    with Session(engine) as session:
        seed(session, default_currency())
        session.commit()
        print("seed complete")


if __name__ == "__main__":
    main()
