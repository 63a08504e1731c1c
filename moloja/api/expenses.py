"""
API: Despesas
"""
from datetime import datetime

from flask import Blueprint, g, jsonify, request

from ..db import db
from ..models import Expense
from ..utils.auth import login_required

bp = Blueprint("expenses", __name__)

CATEGORIES = (
    "Renda", "Salários", "Fornecedores", "Transporte", "Energia", "Água",
    "Comunicações", "Manutenção", "Impostos", "Outros",
)


def _user_expenses():
    return Expense.query.filter_by(user_id=g.current_user.id)


def _validate(data, partial=False):
    if not partial or "description" in data:
        if not (data.get("description") or "").strip():
            return "Descrição obrigatória"
    if not partial or "category" in data:
        if not (data.get("category") or "").strip():
            return "Categoria obrigatória"
    if not partial or "amount" in data:
        try:
            if float(data.get("amount")) <= 0:
                return "O valor deve ser maior que zero"
        except (TypeError, ValueError):
            return "Valor inválido"
    if data.get("date"):
        try:
            datetime.fromisoformat(data["date"])
        except (TypeError, ValueError):
            return "Data inválida"
    return None


@bp.route("", methods=["GET"])
@login_required
def get_expenses():
    """Despesas (mais recentes primeiro); filtros category, start, end"""
    query = _user_expenses()
    if request.args.get("category"):
        query = query.filter_by(category=request.args["category"])
    try:
        if request.args.get("start"):
            query = query.filter(Expense.date >= datetime.fromisoformat(request.args["start"]))
        if request.args.get("end"):
            query = query.filter(Expense.date <= datetime.fromisoformat(request.args["end"]))
    except ValueError:
        return jsonify({"error": "Data inválida"}), 400

    expenses = query.order_by(Expense.date.desc()).all()
    return jsonify({
        "expenses": [e.to_dict() for e in expenses],
        "total": round(sum(e.amount for e in expenses), 2),
    })


@bp.route("/categories", methods=["GET"])
def get_categories():
    return jsonify(list(CATEGORIES))


@bp.route("/<int:id>", methods=["GET"])
@login_required
def get_expense(id):
    return jsonify(_user_expenses().filter_by(id=id).first_or_404().to_dict())


@bp.route("", methods=["POST"])
@login_required
def create_expense():
    data = request.json or {}
    error = _validate(data)
    if error:
        return jsonify({"error": error}), 400

    expense = Expense(
        user_id=g.current_user.id,
        date=datetime.fromisoformat(data["date"]) if data.get("date") else datetime.now(),
        description=data["description"].strip(),
        category=data["category"].strip(),
        amount=float(data["amount"]),
        payment_method=data.get("payment_method") or "Dinheiro",
        notes=data.get("notes"),
    )
    db.session.add(expense)
    db.session.commit()
    return jsonify(expense.to_dict()), 201


@bp.route("/<int:id>", methods=["PUT"])
@login_required
def update_expense(id):
    expense = _user_expenses().filter_by(id=id).first_or_404()
    data = request.json or {}
    error = _validate(data, partial=True)
    if error:
        return jsonify({"error": error}), 400

    for field in ("description", "category", "payment_method", "notes"):
        if field in data:
            setattr(expense, field, data[field])
    if "amount" in data:
        expense.amount = float(data["amount"])
    if data.get("date"):
        expense.date = datetime.fromisoformat(data["date"])

    db.session.commit()
    return jsonify(expense.to_dict())


@bp.route("/<int:id>", methods=["DELETE"])
@login_required
def delete_expense(id):
    expense = _user_expenses().filter_by(id=id).first_or_404()
    db.session.delete(expense)
    db.session.commit()
    return jsonify({"message": "Despesa eliminada"})
