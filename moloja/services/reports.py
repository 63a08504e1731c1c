"""
Serviço: Relatórios de vendas e de stock, resumo financeiro e exportação CSV
"""
import csv
import io
import logging
from datetime import date, datetime, time, timedelta
from typing import Dict, List

from ..db import db
from ..models import FinancialReport, Product, Sale

logger = logging.getLogger(__name__)

GROUP_BY_OPTIONS = ("daily", "weekly", "monthly", "category")
INVENTORY_KINDS = ("all", "low", "out", "category")


def _as_datetime(value, end_of_day=False) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.max if end_of_day else time.min)


def sales_between(user, start, end) -> List[Sale]:
    """Vendas do utilizador entre duas datas (inclusive)"""
    return (
        Sale.query
        .filter(
            Sale.user_id == user.id,
            Sale.date >= _as_datetime(start),
            Sale.date <= _as_datetime(end, end_of_day=True),
        )
        .order_by(Sale.date)
        .all()
    )


def _period_key(when: datetime, group_by: str) -> str:
    day = when.date()
    if group_by == "weekly":
        # Semana começa ao domingo
        return (day - timedelta(days=(day.weekday() + 1) % 7)).isoformat()
    if group_by == "monthly":
        return day.replace(day=1).isoformat()
    return day.isoformat()


def sales_report(user, start, end, group_by="daily") -> List[Dict]:
    """
    Vendas agrupadas por período (daily/weekly/monthly) ou por categoria.
    """
    if group_by not in GROUP_BY_OPTIONS:
        raise ValueError(f"Agrupamento inválido: {group_by}")

    sales = sales_between(user, start, end)

    if group_by == "category":
        categories: Dict[str, Dict] = {}
        for sale in sales:
            for item in sale.items:
                entry = categories.setdefault(item.category or "Sem categoria", {"total": 0.0, "quantity": 0})
                entry["total"] += item.unit_price * item.quantity
                entry["quantity"] += item.quantity
        rows = [
            {"category": c, "total": round(v["total"], 2), "quantity": v["quantity"]}
            for c, v in categories.items()
        ]
        return sorted(rows, key=lambda r: r["total"], reverse=True)

    periods: Dict[str, Dict] = {}
    for sale in sales:
        entry = periods.setdefault(_period_key(sale.date, group_by), {"total": 0.0, "count": 0})
        entry["total"] += sale.total
        entry["count"] += 1

    return [
        {
            "period": period,
            "total": round(v["total"], 2),
            "count": v["count"],
            "average": round(v["total"] / v["count"], 2),
        }
        for period, v in sorted(periods.items())
    ]


def inventory_report(user, kind="all", threshold=10) -> List[Product]:
    """Produtos: todos, stock baixo, esgotados ou ordenados por categoria"""
    if kind not in INVENTORY_KINDS:
        raise ValueError(f"Tipo de relatório inválido: {kind}")

    query = Product.query.filter(Product.user_id == user.id)
    if kind == "low":
        query = query.filter(Product.stock > 0, Product.stock <= threshold)
    elif kind == "out":
        query = query.filter(Product.stock <= 0)

    return query.order_by(Product.category, Product.name).all()


def sales_summary_report(user, days=30, today=None) -> FinancialReport:
    """Resumo dos últimos `days` dias, guardado como FinancialReport"""
    today = today or date.today()
    start = today - timedelta(days=days)
    sales = sales_between(user, start, today)

    total_revenue = round(sum(s.total for s in sales), 2)
    count = len(sales)

    # Custo a partir do preço de compra actual de cada produto
    total_cost = 0.0
    for sale in sales:
        for item in sale.items:
            product = db.session.get(Product, item.product_id) if item.product_id else None
            if product:
                total_cost += (product.purchase_price or 0) * item.quantity
    total_cost = round(total_cost, 2)

    report = FinancialReport(
        user_id=user.id,
        title=f"Resumo de vendas - últimos {days} dias",
        description=f"Vendas de {start.isoformat()} a {today.isoformat()}",
        report_type="sales_summary",
        period_start=_as_datetime(start),
        period_end=_as_datetime(today, end_of_day=True),
        total_revenue=total_revenue,
        total_cost=total_cost,
        total_profit=round(total_revenue - total_cost, 2),
        metrics={
            "sales_count": count,
            "average_sale": round(total_revenue / count, 2) if count else 0,
            "days": days,
        },
    )
    db.session.add(report)
    db.session.commit()

    logger.info("📊 Relatório %s gerado para o utilizador %s", report.id, user.id)
    return report


def export_sales_csv(sales) -> str:
    si = io.StringIO()
    writer = csv.writer(si)
    writer.writerow(["venda", "data", "cliente", "metodo_pagamento", "produto", "categoria",
                     "quantidade", "preco_unitario", "subtotal", "total_venda"])
    for sale in sales:
        when = sale.date.isoformat() if sale.date else ""
        if not sale.items:
            writer.writerow([sale.id, when, sale.customer_name, sale.payment_method, "", "", 0, "", "", sale.total])
        for item in sale.items:
            writer.writerow([
                sale.id, when, sale.customer_name, sale.payment_method,
                item.name, item.category or "", item.quantity, item.unit_price, item.subtotal, sale.total,
            ])
    return si.getvalue()


def export_inventory_csv(products) -> str:
    si = io.StringIO()
    writer = csv.writer(si)
    writer.writerow(["id", "nome", "codigo", "categoria", "preco", "preco_compra", "stock"])
    for p in products:
        writer.writerow([p.id, p.name, p.code or "", p.category, p.price, p.purchase_price, p.stock])
    return si.getvalue()
