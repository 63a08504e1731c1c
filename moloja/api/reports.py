"""
API: Relatórios
Vendas por período, inventário, resumo financeiro, relatório mensal (PDF) e exportação CSV
"""
import logging
import traceback
from datetime import date, datetime, timedelta

from flask import Blueprint, Response, current_app, g, jsonify, request, send_file

from ..models import Product, VoiceSale
from ..services.analytics import monthly_sales_data
from ..services.receipts import generate_monthly_report_pdf, monthly_insights
from ..services.reports import (
    export_inventory_csv,
    export_sales_csv,
    inventory_report,
    sales_between,
    sales_report,
    sales_summary_report,
)
from ..utils.auth import login_required

logger = logging.getLogger(__name__)

bp = Blueprint("reports", __name__)


def _date_range():
    """start/end (AAAA-MM-DD) dos query params; por omissão os últimos 30 dias"""
    today = date.today()
    start = request.args.get("start")
    end = request.args.get("end")
    start = date.fromisoformat(start) if start else today - timedelta(days=29)
    end = date.fromisoformat(end) if end else today
    if start > end:
        raise ValueError("A data inicial é posterior à data final")
    return start, end


def _month():
    today = date.today()
    year = request.args.get("year", today.year, type=int)
    month = request.args.get("month", today.month, type=int)
    if month < 1 or month > 12:
        raise ValueError("Mês inválido")
    return year, month


def _monthly_data(user, year, month):
    start = datetime(year, month, 1)
    end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)
    voice_sales = (
        VoiceSale.query
        .filter(VoiceSale.user_id == user.id, VoiceSale.sale_date >= start, VoiceSale.sale_date < end)
        .all()
    )
    return monthly_sales_data([(s.sale_date, s.total_amount) for s in voice_sales], year, month)


@bp.route("/sales", methods=["GET"])
@login_required
def get_sales_report():
    """group_by: daily, weekly, monthly ou category"""
    try:
        start, end = _date_range()
        rows = sales_report(g.current_user, start, end, request.args.get("group_by", "daily"))
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    return jsonify({
        "start": start.isoformat(),
        "end": end.isoformat(),
        "rows": rows,
        "total": round(sum(r["total"] for r in rows), 2),
    })


@bp.route("/inventory", methods=["GET"])
@login_required
def get_inventory_report():
    """kind: all, low, out ou category"""
    threshold = request.args.get("threshold", current_app.config["LOW_STOCK_THRESHOLD"], type=int)
    try:
        products = inventory_report(g.current_user, request.args.get("kind", "all"), threshold)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    return jsonify({
        "products": [p.to_dict() for p in products],
        "count": len(products),
        "stock_value": round(sum(p.purchase_price * p.stock for p in products), 2),
    })


@bp.route("/summary", methods=["POST", "GET"])
@login_required
def create_summary_report():
    """Resumo dos últimos `days` dias (guardado)"""
    days = request.args.get("days", 30, type=int)
    if days < 1:
        return jsonify({"error": "days deve ser maior que zero"}), 400

    try:
        report = sales_summary_report(g.current_user, days=days)
    except Exception as e:
        logger.error("Erro ao gerar resumo: %s\n%s", e, traceback.format_exc())
        return jsonify({"error": f"Erro ao gerar relatório: {str(e)}"}), 500

    return jsonify(report.to_dict())


@bp.route("/monthly", methods=["GET"])
@login_required
def get_monthly_report():
    try:
        year, month = _month()
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    data = _monthly_data(g.current_user, year, month)
    data["insights"] = monthly_insights(data)
    return jsonify(data)


@bp.route("/monthly.pdf", methods=["GET"])
@login_required
def download_monthly_report():
    try:
        year, month = _month()
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    try:
        pdf = generate_monthly_report_pdf(_monthly_data(g.current_user, year, month), year, month)
    except Exception as e:
        logger.error("Erro ao gerar relatório mensal: %s\n%s", e, traceback.format_exc())
        return jsonify({"error": f"Erro ao gerar relatório: {str(e)}"}), 500

    return send_file(
        pdf,
        mimetype="application/pdf",
        as_attachment=True,
        download_name=f"relatorio-mensal-{year}-{month:02d}.pdf",
    )


@bp.route("/export/sales.csv", methods=["GET"])
@login_required
def export_sales():
    try:
        start, end = _date_range()
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    output = export_sales_csv(sales_between(g.current_user, start, end))
    return Response(
        output,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename=vendas-{start}-{end}.csv"},
    )


@bp.route("/export/inventory.csv", methods=["GET"])
@login_required
def export_inventory():
    products = Product.query.filter_by(user_id=g.current_user.id).order_by(Product.name).all()
    return Response(
        export_inventory_csv(products),
        mimetype="text/csv",
        headers={"Content-Disposition": "attachment; filename=inventario.csv"},
    )
