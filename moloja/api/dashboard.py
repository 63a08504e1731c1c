"""
API: Dashboard
KPIs, vendas diárias, categorias, mais vendidos e alertas de stock
"""
from datetime import date, timedelta

from flask import Blueprint, current_app, g, jsonify, request

from ..models import Sale
from ..services.analytics import (
    calculate_sales_kpis,
    daily_profit,
    daily_sales,
    low_stock_products,
    out_of_stock_products,
    products_in_stock,
    sales_by_category,
    stock_summary,
    top_products,
)
from ..services.reports import sales_between
from ..utils.auth import login_required

bp = Blueprint("dashboard", __name__)

MAX_DAYS = 366


def _days(default=7):
    days = request.args.get("days", default, type=int)
    if days is None or days < 1 or days > MAX_DAYS:
        raise ValueError(f"days deve estar entre 1 e {MAX_DAYS}")
    return days


def _threshold():
    return request.args.get("threshold", current_app.config["LOW_STOCK_THRESHOLD"], type=int)


@bp.route("/kpis", methods=["GET"])
@login_required
def get_kpis():
    """KPIs do período actual comparados com o período anterior do mesmo tamanho"""
    try:
        days = _days(30)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    today = date.today()
    recent_start = today - timedelta(days=days - 1)
    previous_end = recent_start - timedelta(days=1)
    previous_start = previous_end - timedelta(days=days - 1)

    recent = sales_between(g.current_user, recent_start, today)
    previous = sales_between(g.current_user, previous_start, previous_end)

    kpis = calculate_sales_kpis(recent, previous)
    kpis["days"] = days
    return jsonify(kpis)


@bp.route("/daily-sales", methods=["GET"])
@login_required
def get_daily_sales():
    try:
        days = _days(7)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    today = date.today()
    sales = sales_between(g.current_user, today - timedelta(days=days - 1), today)
    return jsonify(daily_sales(sales, days=days, today=today))


@bp.route("/sales-by-category", methods=["GET"])
@login_required
def get_sales_by_category():
    try:
        days = _days(30)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    today = date.today()
    return jsonify(sales_by_category(sales_between(g.current_user, today - timedelta(days=days - 1), today)))


@bp.route("/top-products", methods=["GET"])
@login_required
def get_top_products():
    try:
        days = _days(30)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    limit = request.args.get("limit", 5, type=int)
    today = date.today()
    sales = sales_between(g.current_user, today - timedelta(days=days - 1), today)
    return jsonify(top_products(sales, limit=limit))


@bp.route("/low-stock", methods=["GET"])
@login_required
def get_low_stock():
    return jsonify([p.to_dict() for p in low_stock_products(g.current_user, _threshold())])


@bp.route("/in-stock", methods=["GET"])
@login_required
def get_in_stock():
    return jsonify([p.to_dict() for p in products_in_stock(g.current_user)])


@bp.route("/out-of-stock", methods=["GET"])
@login_required
def get_out_of_stock():
    return jsonify([p.to_dict() for p in out_of_stock_products(g.current_user)])


@bp.route("/stock-summary", methods=["GET"])
@login_required
def get_stock_summary():
    return jsonify(stock_summary(g.current_user, _threshold()))


@bp.route("/recent-sales", methods=["GET"])
@login_required
def get_recent_sales():
    limit = request.args.get("limit", 5, type=int)
    sales = (
        Sale.query
        .filter_by(user_id=g.current_user.id)
        .order_by(Sale.date.desc(), Sale.id.desc())
        .limit(limit)
        .all()
    )
    return jsonify([s.to_dict(include_items=False) for s in sales])


@bp.route("/daily-profit", methods=["GET"])
@login_required
def get_daily_profit():
    """Lucro estimado das vendas por voz de hoje"""
    return jsonify(daily_profit(g.current_user, default_rate=current_app.config["DEFAULT_PROFIT_RATE"]))
