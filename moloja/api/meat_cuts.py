"""
API: Cortes de carne (módulo talho)
"""
from flask import Blueprint, g, jsonify, request

from ..db import db
from ..models import MeatCut
from ..models.meat_cut import ANIMAL_TYPES
from ..utils.auth import login_required

bp = Blueprint("meat_cuts", __name__)

FLOAT_FIELDS = ("price_per_kg", "cost_per_kg", "stock_weight")


def _user_cuts():
    return MeatCut.query.filter_by(user_id=g.current_user.id)


def _validate(data, partial=False):
    if not partial or "name" in data:
        if not (data.get("name") or "").strip():
            return "Nome obrigatório"
    if not partial or "animal_type" in data:
        if data.get("animal_type") not in ANIMAL_TYPES:
            return f"Tipo de animal inválido. Opções: {', '.join(ANIMAL_TYPES)}"
    if not partial and data.get("price_per_kg") is None:
        return "Preço por kg obrigatório"

    for field in FLOAT_FIELDS:
        if data.get(field) is not None:
            try:
                if float(data[field]) < 0:
                    return f"{field} não pode ser negativo"
            except (TypeError, ValueError):
                return f"{field} inválido"
    return None


@bp.route("", methods=["GET"])
@login_required
def get_meat_cuts():
    """Lista os cortes (filtro opcional por animal_type)"""
    query = _user_cuts()
    animal_type = request.args.get("animal_type")
    if animal_type:
        query = query.filter_by(animal_type=animal_type)
    return jsonify([c.to_dict() for c in query.order_by(MeatCut.name).all()])


@bp.route("/animal-types", methods=["GET"])
def get_animal_types():
    return jsonify([{"value": k, "label": v} for k, v in ANIMAL_TYPES.items()])


@bp.route("/<int:id>", methods=["GET"])
@login_required
def get_meat_cut(id):
    return jsonify(_user_cuts().filter_by(id=id).first_or_404().to_dict())


@bp.route("", methods=["POST"])
@login_required
def create_meat_cut():
    data = request.json or {}
    error = _validate(data)
    if error:
        return jsonify({"error": error}), 400

    cut = MeatCut(
        user_id=g.current_user.id,
        name=data["name"].strip(),
        animal_type=data["animal_type"],
        price_per_kg=float(data["price_per_kg"]),
        cost_per_kg=float(data.get("cost_per_kg") or 0),
        stock_weight=float(data.get("stock_weight") or 0),
        description=data.get("description"),
        barcode=data.get("barcode"),
    )
    db.session.add(cut)
    db.session.commit()
    return jsonify(cut.to_dict()), 201


@bp.route("/<int:id>", methods=["PUT"])
@login_required
def update_meat_cut(id):
    cut = _user_cuts().filter_by(id=id).first_or_404()
    data = request.json or {}
    error = _validate(data, partial=True)
    if error:
        return jsonify({"error": error}), 400

    for field in ("name", "animal_type", "description", "barcode"):
        if field in data:
            setattr(cut, field, data[field])
    for field in FLOAT_FIELDS:
        if data.get(field) is not None:
            setattr(cut, field, float(data[field]))

    db.session.commit()
    return jsonify(cut.to_dict())


@bp.route("/<int:id>", methods=["DELETE"])
@login_required
def delete_meat_cut(id):
    cut = _user_cuts().filter_by(id=id).first_or_404()
    db.session.delete(cut)
    db.session.commit()
    return jsonify({"message": "Corte eliminado"})
