"""
Serviço: Indicadores do dashboard
Vendas diárias, por categoria, KPIs, mais vendidos, stock baixo e lucro do dia
"""
import calendar
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

from ..models import Product, VoiceSale, User


def _day(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _pct_change(current, previous) -> float:
    if not previous:
        return 0.0
    return round((current - previous) / previous * 100, 1)


def daily_sales(sales, days=7, today: Optional[date] = None) -> List[Dict]:
    """Um registo por dia dos últimos `days` dias (mais antigo primeiro)"""
    today = today or date.today()
    buckets = {}
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        buckets[day] = {"date": day.isoformat(), "sales": 0.0, "transactions": 0}

    for sale in sales:
        bucket = buckets.get(_day(sale.date))
        if bucket:
            bucket["sales"] = round(bucket["sales"] + sale.total, 2)
            bucket["transactions"] += 1

    return list(buckets.values())


def sales_by_category(sales) -> List[Dict]:
    """Receita por categoria a partir dos itens vendidos"""
    categories: Dict[str, float] = {}
    total = 0.0

    for sale in sales:
        for item in sale.items:
            category = item.category or "Outros"
            amount = item.unit_price * item.quantity
            categories[category] = categories.get(category, 0) + amount
            total += amount

    result = [
        {
            "category": category,
            "sales": round(amount, 2),
            "percentage": round(amount / total * 100, 1) if total else 0.0,
        }
        for category, amount in categories.items()
    ]
    result.sort(key=lambda r: r["sales"], reverse=True)
    return result


def calculate_sales_kpis(recent_sales, previous_sales) -> Dict:
    """KPIs do período actual e variação (%) face ao período anterior"""
    total_revenue = sum(s.total for s in recent_sales)
    total_sales = len(recent_sales)
    average_ticket = total_revenue / total_sales if total_sales else 0

    previous_revenue = sum(s.total for s in previous_sales)
    previous_count = len(previous_sales)
    previous_ticket = previous_revenue / previous_count if previous_count else 0

    return {
        "total_revenue": round(total_revenue, 2),
        "total_sales": total_sales,
        "average_ticket": round(average_ticket, 2),
        "revenue_change": _pct_change(total_revenue, previous_revenue),
        "sales_change": _pct_change(total_sales, previous_count),
        "ticket_change": _pct_change(average_ticket, previous_ticket),
    }


def top_products(sales, limit=5) -> List[Dict]:
    """Produtos mais vendidos por quantidade"""
    totals: Dict[str, Dict] = {}
    for sale in sales:
        for item in sale.items:
            key = item.product_id if item.product_id is not None else item.name
            entry = totals.setdefault(key, {
                "product_id": item.product_id,
                "name": item.name,
                "category": item.category,
                "quantity": 0,
                "revenue": 0.0,
            })
            entry["quantity"] += item.quantity
            entry["revenue"] = round(entry["revenue"] + item.unit_price * item.quantity, 2)

    ranked = sorted(totals.values(), key=lambda e: (e["quantity"], e["revenue"]), reverse=True)
    return ranked[:limit]


def low_stock_products(user, threshold=10) -> List[Product]:
    """Produtos com 0 < stock <= threshold, menor stock primeiro"""
    return (
        Product.query
        .filter(Product.user_id == user.id, Product.stock > 0, Product.stock <= threshold)
        .order_by(Product.stock, Product.name)
        .all()
    )


def products_in_stock(user) -> List[Product]:
    return Product.query.filter(Product.user_id == user.id, Product.stock > 0).order_by(Product.name).all()


def out_of_stock_products(user) -> List[Product]:
    return Product.query.filter(Product.user_id == user.id, Product.stock <= 0).order_by(Product.name).all()


def stock_summary(user, threshold=10) -> Dict:
    products = Product.query.filter_by(user_id=user.id).all()
    return {
        "total_products": len(products),
        "in_stock": sum(1 for p in products if p.stock > 0),
        "low_stock": sum(1 for p in products if 0 < p.stock <= threshold),
        "out_of_stock": sum(1 for p in products if p.stock <= 0),
        "stock_value": round(sum(p.purchase_price * p.stock for p in products), 2),
        "retail_value": round(sum(p.price * p.stock for p in products), 2),
    }


def daily_profit(user: User, today: Optional[date] = None, default_rate=5.0) -> Dict:
    """Vendas por voz de hoje e lucro estimado à taxa do perfil"""
    today = today or date.today()
    start = datetime.combine(today, datetime.min.time())
    end = start + timedelta(days=1)

    sales = (
        VoiceSale.query
        .filter(VoiceSale.user_id == user.id, VoiceSale.sale_date >= start, VoiceSale.sale_date < end)
        .all()
    )
    profit_rate = user.profit_rate or default_rate
    total = sum(s.total_amount for s in sales)

    return {
        "total_sales": round(total, 2),
        "estimated_profit": round(total * profit_rate / 100, 2),
        "profit_rate": profit_rate,
        "transaction_count": len(sales),
    }


def monthly_sales_data(entries, year: int, month: int) -> Dict:
    """
    Resumo diário de um mês.

    Args:
        entries: lista de (data, valor)

    Returns:
        dict com daily_sales, total_revenue, total_transactions,
        average_daily_revenue, best_day e worst_day (só dias com vendas)
    """
    days_in_month = calendar.monthrange(year, month)[1]
    days = {
        date(year, month, d): {"date": date(year, month, d).isoformat(), "total_revenue": 0.0, "transaction_count": 0}
        for d in range(1, days_in_month + 1)
    }

    for when, amount in entries:
        summary = days.get(_day(when))
        if summary:
            summary["total_revenue"] = round(summary["total_revenue"] + amount, 2)
            summary["transaction_count"] += 1

    daily = list(days.values())
    total_revenue = round(sum(d["total_revenue"] for d in daily), 2)
    total_transactions = sum(d["transaction_count"] for d in daily)

    sales_days = [d for d in daily if d["transaction_count"] > 0]
    best_day = max(sales_days, key=lambda d: d["total_revenue"]) if sales_days else None
    worst_day = min(sales_days, key=lambda d: d["total_revenue"]) if sales_days else None

    return {
        "year": year,
        "month": month,
        "daily_sales": daily,
        "total_revenue": total_revenue,
        "total_transactions": total_transactions,
        "average_daily_revenue": round(total_revenue / days_in_month, 2),
        "best_day": best_day,
        "worst_day": worst_day,
    }
