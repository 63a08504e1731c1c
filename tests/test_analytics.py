from datetime import date, datetime, timedelta
from types import SimpleNamespace

import pytest

from moloja.db import db
from moloja.models import VoiceSale
from moloja.services.analytics import (
    calculate_sales_kpis,
    daily_profit,
    daily_sales,
    low_stock_products,
    monthly_sales_data,
    sales_by_category,
    top_products,
)
from moloja.utils.formatting import format_currency


def _item(name, category, price, quantity, product_id=None):
    return SimpleNamespace(name=name, category=category, unit_price=price, quantity=quantity, product_id=product_id)


def _sale(when, total, items=()):
    return SimpleNamespace(date=when, total=total, items=list(items))


TODAY = date(2024, 5, 15)


class TestDailySales:
    def test_always_one_bucket_per_day(self):
        buckets = daily_sales([], days=7, today=TODAY)
        assert len(buckets) == 7
        assert buckets[0]["date"] == "2024-05-09"
        assert buckets[-1]["date"] == "2024-05-15"

    def test_sums_per_day_and_ignores_older_sales(self):
        sales = [
            _sale(datetime(2024, 5, 15, 10), 1000),
            _sale(datetime(2024, 5, 15, 18), 500),
            _sale(datetime(2024, 5, 14, 9), 200),
            _sale(datetime(2024, 4, 1, 9), 9999),
        ]
        buckets = {b["date"]: b for b in daily_sales(sales, days=3, today=TODAY)}
        assert buckets["2024-05-15"] == {"date": "2024-05-15", "sales": 1500, "transactions": 2}
        assert buckets["2024-05-14"]["sales"] == 200
        assert buckets["2024-05-13"]["transactions"] == 0


def test_sales_by_category():
    sales = [
        _sale(TODAY, 0, [_item("Arroz", "Alimentos", 500, 3), _item("Leite", "Laticínios", 500, 1)]),
        _sale(TODAY, 0, [_item("Sem cat", None, 1000, 1)]),
    ]
    result = sales_by_category(sales)
    assert result[0] == {"category": "Alimentos", "sales": 1500, "percentage": 50.0}
    assert {r["category"] for r in result} == {"Alimentos", "Laticínios", "Outros"}


def test_calculate_sales_kpis():
    recent = [_sale(TODAY, 1000), _sale(TODAY, 3000)]
    previous = [_sale(TODAY, 1000)]
    kpis = calculate_sales_kpis(recent, previous)
    assert kpis["total_revenue"] == 4000
    assert kpis["total_sales"] == 2
    assert kpis["average_ticket"] == 2000
    assert kpis["revenue_change"] == 300.0
    assert kpis["sales_change"] == 100.0


def test_kpis_without_previous_period():
    assert calculate_sales_kpis([], [])["revenue_change"] == 0.0


def test_top_products_by_quantity():
    sales = [
        _sale(TODAY, 0, [_item("Arroz", "A", 500, 2, 1), _item("Leite", "L", 1200, 5, 2)]),
        _sale(TODAY, 0, [_item("Arroz", "A", 500, 1, 1)]),
    ]
    top = top_products(sales, limit=1)
    assert top == [{"product_id": 2, "name": "Leite", "category": "L", "quantity": 5, "revenue": 6000}]


def test_low_stock_products(user, make_product):
    make_product(name="Esgotado", stock=0)
    make_product(name="Pouco", stock=3)
    make_product(name="Muito", stock=50)
    make_product(name="Quase", stock=10)
    assert [p.name for p in low_stock_products(user, threshold=10)] == ["Pouco", "Quase"]


def test_daily_profit(user):
    user.profit_rate = 20
    now = datetime.now()
    db.session.add_all([
        VoiceSale(user_id=user.id, original_voice_input="a", product_name="a", total_amount=1000, sale_date=now),
        VoiceSale(user_id=user.id, original_voice_input="b", product_name="b", total_amount=500,
                  sale_date=now - timedelta(days=2)),
    ])
    db.session.commit()

    profit = daily_profit(user, today=now.date())
    assert profit == {"total_sales": 1000, "estimated_profit": 200, "profit_rate": 20, "transaction_count": 1}


class TestMonthlySalesData:
    def test_every_day_of_the_month(self):
        data = monthly_sales_data([], 2024, 2)
        assert len(data["daily_sales"]) == 29
        assert data["best_day"] is None

    def test_best_and_worst_days(self):
        entries = [
            (datetime(2024, 3, 1, 10), 1000),
            (datetime(2024, 3, 1, 11), 500),
            (datetime(2024, 3, 20, 9), 200),
            (datetime(2024, 4, 1, 9), 7000),
        ]
        data = monthly_sales_data(entries, 2024, 3)
        assert data["total_revenue"] == 1700
        assert data["total_transactions"] == 3
        assert data["best_day"]["date"] == "2024-03-01"
        assert data["worst_day"]["date"] == "2024-03-20"
        assert data["average_daily_revenue"] == pytest.approx(1700 / 31, abs=0.01)


@pytest.mark.parametrize("value,expected", [
    (1234.5, "1 234,50 Kz"),
    (0, "0,00 Kz"),
    (1500000, "1 500 000,00 Kz"),
])
def test_format_currency(value, expected):
    assert format_currency(value) == expected
