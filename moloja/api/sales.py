"""
API: Vendas
Checkout, histórico e recibo em PDF
"""
import logging
import traceback
from datetime import datetime

from flask import Blueprint, g, jsonify, request, send_file

from ..db import db
from ..models import Sale
from ..services.cart import checkout
from ..services.receipts import generate_receipt_pdf, receipt_filename
from ..utils.auth import login_required

logger = logging.getLogger(__name__)

bp = Blueprint("sales", __name__)

CUSTOMER_FIELDS = ("name", "phone", "email", "address", "nif")


def _user_sales():
    return Sale.query.filter_by(user_id=g.current_user.id)


@bp.route("/checkout", methods=["POST"])
@login_required
def create_sale():
    """
    Finaliza a venda.

    Body:
        items: [{"product_id", "quantity"}]
        amount_paid, payment_method, notes
        customer: {name, phone, email, address, nif}
    """
    data = request.json or {}
    customer = {k: v for k, v in (data.get("customer") or {}).items() if k in CUSTOMER_FIELDS and v}

    date = None
    if data.get("date"):
        try:
            date = datetime.fromisoformat(data["date"])
        except (TypeError, ValueError):
            return jsonify({"error": "Data inválida"}), 400

    try:
        sale = checkout(
            g.current_user,
            data.get("items") or [],
            data.get("amount_paid"),
            customer=customer,
            notes=data.get("notes"),
            payment_method=data.get("payment_method") or "Dinheiro",
            date=date,
        )
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error("Erro no checkout: %s\n%s", e, traceback.format_exc())
        return jsonify({"error": f"Erro ao registar venda: {str(e)}"}), 500

    return jsonify(sale.to_dict()), 201


@bp.route("", methods=["GET"])
@login_required
def get_sales():
    """Histórico (mais recentes primeiro); limit opcional"""
    query = _user_sales().order_by(Sale.date.desc(), Sale.id.desc())
    limit = request.args.get("limit", type=int)
    if limit:
        query = query.limit(limit)
    include_items = request.args.get("items", "true") != "false"
    return jsonify([s.to_dict(include_items=include_items) for s in query.all()])


@bp.route("/<int:id>", methods=["GET"])
@login_required
def get_sale(id):
    return jsonify(_user_sales().filter_by(id=id).first_or_404().to_dict())


@bp.route("/<int:id>", methods=["DELETE"])
@login_required
def delete_sale(id):
    sale = _user_sales().filter_by(id=id).first_or_404()
    if sale.credit_notes:
        return jsonify({"error": "A venda tem notas de crédito associadas"}), 409
    db.session.delete(sale)
    db.session.commit()
    return jsonify({"message": "Venda eliminada"})


@bp.route("", methods=["DELETE"])
@login_required
def clear_sales():
    """Apaga todas as vendas do utilizador (e as notas de crédito associadas)"""
    sales = _user_sales().all()
    count = len(sales)
    try:
        for sale in sales:
            for note in sale.credit_notes:
                db.session.delete(note)
            db.session.delete(sale)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Erro ao apagar vendas: %s\n%s", e, traceback.format_exc())
        return jsonify({"error": f"Erro ao apagar vendas: {str(e)}"}), 500

    logger.info("🗑️ %d vendas apagadas", count)
    return jsonify({"deleted": count})


@bp.route("/<int:id>/receipt.pdf", methods=["GET"])
@login_required
def download_receipt(id):
    """Recibo em PDF com os dados da empresa do perfil"""
    sale = _user_sales().filter_by(id=id).first_or_404()
    try:
        pdf = generate_receipt_pdf(sale, g.current_user)
    except Exception as e:
        logger.error("Erro ao gerar recibo: %s\n%s", e, traceback.format_exc())
        return jsonify({"error": f"Erro ao gerar recibo: {str(e)}"}), 500

    return send_file(
        pdf,
        mimetype="application/pdf",
        as_attachment=True,
        download_name=receipt_filename(sale),
    )
