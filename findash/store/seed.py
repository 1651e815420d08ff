"""
Seed data used when a collection has never been stored.

Transactions are dated inside the current month so a fresh install shows
a populated dashboard.
"""

from datetime import date, datetime, time
from typing import Optional

from findash.models.finance import (
    Category,
    CategoryIcon,
    Goal,
    SubItem,
    Transaction,
    TransactionType,
)


def seed_categories() -> list[Category]:
    return [
        Category(id="cat1", name="Salário", icon=CategoryIcon.BRIEFCASE,
                 type=TransactionType.INCOME),
        Category(id="cat2", name="Freelance", icon=CategoryIcon.BANKNOTES,
                 type=TransactionType.INCOME),
        Category(id="cat3", name="Presentes", icon=CategoryIcon.GIFT,
                 type=TransactionType.INCOME),
        Category(id="cat4", name="Mercado", icon=CategoryIcon.SHOPPING_CART,
                 type=TransactionType.EXPENSE),
        Category(id="cat5", name="Contas", icon=CategoryIcon.STOREFRONT,
                 type=TransactionType.EXPENSE),
        Category(id="cat6", name="Transporte", icon=CategoryIcon.CREDIT_CARD,
                 type=TransactionType.EXPENSE),
    ]


def seed_transactions(today: Optional[date] = None) -> list[Transaction]:
    """Four sample transactions on days 1, 2, 5 and 15 of today's month."""
    today = today or date.today()

    def on_day(day: int) -> datetime:
        return datetime.combine(today.replace(day=day), time.min)

    return [
        Transaction(
            id="t1",
            category_id="cat1",
            type=TransactionType.INCOME,
            amount=3200,
            description="Salário Mensal",
            date=on_day(1),
        ),
        Transaction(
            id="t2",
            category_id="cat4",
            type=TransactionType.EXPENSE,
            amount=450,
            description="Compras do mês",
            date=on_day(2),
            notes="Comprado no Supermercado XYZ.",
            sub_items=[
                SubItem(id="si1", description="Frutas e Vegetais", amount=150),
                SubItem(id="si2", description="Carnes", amount=200),
                SubItem(id="si3", description="Produtos de limpeza", amount=100),
            ],
        ),
        Transaction(
            id="t3",
            category_id="cat5",
            type=TransactionType.EXPENSE,
            amount=550,
            description="Aluguel e Contas",
            date=on_day(5),
            notes="Pagamento recorrente.",
        ),
        Transaction(
            id="t4",
            category_id="cat2",
            type=TransactionType.INCOME,
            amount=500,
            description="Serviços extras",
            date=on_day(15),
        ),
    ]


def seed_goals() -> list[Goal]:
    return [
        Goal(
            id="g1",
            name="Reduzir gastos",
            description="Parar de comprar coisas desnecessárias",
            target_amount=1500,
            current_amount=1000,
        ),
        Goal(
            id="g2",
            name="Viagem de Férias",
            description="Guardar dinheiro para viagem em Dezembro",
            target_amount=5000,
            current_amount=1200,
        ),
    ]
