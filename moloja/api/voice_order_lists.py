"""
API: Listas de pedidos por voz
"""
from flask import Blueprint, g, jsonify, request

from ..db import db
from ..models import VoiceOrderList
from ..services.voice_parser import parse_voice_order
from ..utils.auth import login_required

bp = Blueprint("voice_order_lists", __name__)

STATUSES = ("pending", "completed")


def _user_lists():
    return VoiceOrderList.query.filter_by(user_id=g.current_user.id)


def _products_from(data):
    """Produtos da lista; aceita dicts já prontos ou frases ditadas (texts)"""
    products = data.get("products")
    if products is None and data.get("texts"):
        products = [parse_voice_order(text) for text in data["texts"] if (text or "").strip()]
    if products is not None and not isinstance(products, list):
        raise ValueError("products deve ser uma lista")
    return products


@bp.route("", methods=["GET"])
@login_required
def get_lists():
    query = _user_lists()
    if request.args.get("status"):
        query = query.filter_by(status=request.args["status"])
    return jsonify([l.to_dict() for l in query.order_by(VoiceOrderList.created_at.desc()).all()])


@bp.route("/<int:id>", methods=["GET"])
@login_required
def get_list(id):
    return jsonify(_user_lists().filter_by(id=id).first_or_404().to_dict())


@bp.route("", methods=["POST"])
@login_required
def create_list():
    data = request.json or {}
    try:
        products = _products_from(data) or []
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    order_list = VoiceOrderList(user_id=g.current_user.id, status="pending", products=products)
    db.session.add(order_list)
    db.session.commit()
    return jsonify(order_list.to_dict()), 201


@bp.route("/<int:id>", methods=["PUT"])
@login_required
def update_list(id):
    order_list = _user_lists().filter_by(id=id).first_or_404()
    data = request.json or {}

    if "status" in data:
        if data["status"] not in STATUSES:
            return jsonify({"error": f"Estado inválido. Opções: {', '.join(STATUSES)}"}), 400
        order_list.status = data["status"]

    try:
        products = _products_from(data)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    if products is not None:
        order_list.products = products

    db.session.commit()
    return jsonify(order_list.to_dict())


@bp.route("/<int:id>", methods=["DELETE"])
@login_required
def delete_list(id):
    order_list = _user_lists().filter_by(id=id).first_or_404()
    db.session.delete(order_list)
    db.session.commit()
    return jsonify({"message": "Lista eliminada"})
