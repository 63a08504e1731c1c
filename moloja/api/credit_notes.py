"""
API: Notas de crédito
Devoluções sobre vendas existentes; só notas pendentes mudam de estado
"""
import logging

from flask import Blueprint, g, jsonify, request

from ..db import db
from ..models import CreditNote, Sale
from ..utils.auth import login_required

logger = logging.getLogger(__name__)

bp = Blueprint("credit_notes", __name__)

MIN_REASON_LENGTH = 3


def _user_notes():
    return CreditNote.query.filter_by(user_id=g.current_user.id)


def _already_returned(sale):
    """Quantidades e valor já devolvidos por notas não rejeitadas da venda"""
    quantities = {}
    credited = 0.0
    for note in sale.credit_notes:
        if note.status == "rejected":
            continue
        credited += note.total or 0
        for item in note.items or []:
            item_id = item.get("sale_item_id")
            quantities[item_id] = quantities.get(item_id, 0) + (item.get("quantity") or 0)
    return quantities, round(credited, 2)


def _returned_items(sale, requested, returned=None):
    """
    Itens devolvidos a partir da venda, descontando o que já foi devolvido.

    Args:
        requested: [{"sale_item_id", "quantity"}] ou None para o que resta de todos os itens
        returned: {sale_item_id: quantidade já devolvida}

    Raises:
        ValueError: item que não pertence à venda, repetido ou quantidade inválida
    """
    returned = returned or {}
    by_id = {item.id: item for item in sale.items}

    def _line(item, quantity):
        return {
            "sale_item_id": item.id,
            "name": item.name,
            "unit_price": item.unit_price,
            "quantity": quantity,
            "subtotal": round(item.unit_price * quantity, 2),
        }

    if not requested:
        return [
            _line(item, item.quantity - returned.get(item.id, 0))
            for item in sale.items
            if item.quantity - returned.get(item.id, 0) > 0
        ]

    items = []
    seen = set()
    for entry in requested:
        item = by_id.get(entry.get("sale_item_id"))
        if item is None:
            raise ValueError(f"O item {entry.get('sale_item_id')} não pertence à venda")
        if item.id in seen:
            raise ValueError(f"O item {item.id} está repetido")
        seen.add(item.id)

        available = item.quantity - returned.get(item.id, 0)
        try:
            quantity = int(entry.get("quantity") or available)
        except (TypeError, ValueError):
            raise ValueError("Quantidade inválida")
        if quantity <= 0 or quantity > available:
            raise ValueError(f"Quantidade inválida para {item.name} (máximo {max(available, 0)})")

        items.append(_line(item, quantity))
    return items


@bp.route("", methods=["POST"])
@login_required
def create_credit_note():
    """
    Cria uma nota de crédito.

    Body:
        original_sale_id, reason (>= 3 caracteres), observations,
        items: [{"sale_item_id", "quantity"}] (opcional; por omissão tudo o que falta devolver)
    """
    data = request.json or {}

    reason = (data.get("reason") or "").strip()
    if len(reason) < MIN_REASON_LENGTH:
        return jsonify({"error": f"O motivo deve ter pelo menos {MIN_REASON_LENGTH} caracteres"}), 400

    sale = Sale.query.filter_by(id=data.get("original_sale_id"), user_id=g.current_user.id).first()
    if not sale:
        return jsonify({"error": "Venda original não encontrada"}), 404

    returned, credited = _already_returned(sale)
    remaining = round(sale.total - credited, 2)
    if remaining <= 0:
        return jsonify({"error": "A venda já foi totalmente devolvida"}), 409

    try:
        items = _returned_items(sale, data.get("items"), returned)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    if not items:
        return jsonify({"error": "A venda já foi totalmente devolvida"}), 409

    total = min(round(sum(i["subtotal"] for i in items), 2), remaining)

    note = CreditNote(
        user_id=g.current_user.id,
        original_sale_id=sale.id,
        reason=reason,
        observations=data.get("observations"),
        customer=sale.customer or {},
        items=items,
        total=total,
        status="pending",
    )
    db.session.add(note)
    db.session.commit()

    logger.info("📝 Nota de crédito %s criada para a venda %s (%.2f)", note.id, sale.id, total)
    return jsonify(note.to_dict()), 201


@bp.route("", methods=["GET"])
@login_required
def get_credit_notes():
    """Notas de crédito (mais recentes primeiro); filtro status"""
    query = _user_notes()
    if request.args.get("status"):
        query = query.filter_by(status=request.args["status"])
    notes = query.order_by(CreditNote.date.desc(), CreditNote.id.desc()).all()
    return jsonify([n.to_dict() for n in notes])


@bp.route("/<int:id>", methods=["GET"])
@login_required
def get_credit_note(id):
    return jsonify(_user_notes().filter_by(id=id).first_or_404().to_dict())


@bp.route("/by-sale/<int:sale_id>", methods=["GET"])
@login_required
def get_credit_notes_by_sale(sale_id):
    notes = _user_notes().filter_by(original_sale_id=sale_id).order_by(CreditNote.date.desc()).all()
    return jsonify([n.to_dict() for n in notes])


def _change_status(id, status):
    note = _user_notes().filter_by(id=id).first_or_404()
    if note.status != "pending":
        return jsonify({"error": f"A nota de crédito já está {note.status}"}), 409

    note.status = status
    db.session.commit()
    logger.info("Nota de crédito %s: %s", note.id, status)
    return jsonify(note.to_dict())


@bp.route("/<int:id>/approve", methods=["POST"])
@login_required
def approve_credit_note(id):
    return _change_status(id, "approved")


@bp.route("/<int:id>/reject", methods=["POST"])
@login_required
def reject_credit_note(id):
    return _change_status(id, "rejected")
