"""
API: Produtos de supermercado
CRUD com desconto, validade e destaque
"""
from datetime import datetime

from flask import Blueprint, g, jsonify, request

from ..db import db
from ..models import SupermarketProduct
from ..models.supermarket_product import CATEGORY_TYPES
from ..utils.auth import login_required

bp = Blueprint("supermarket_products", __name__)

TEXT_FIELDS = ("name", "category_type", "description", "barcode", "brand", "unit", "featured")


def _user_products():
    return SupermarketProduct.query.filter_by(user_id=g.current_user.id)


def _parse_date(value):
    if not value:
        return None
    return datetime.strptime(value[:10], "%Y-%m-%d").date()


def _validate(data, partial=False):
    if not partial or "name" in data:
        if not (data.get("name") or "").strip():
            return "Nome obrigatório"
    if not partial or "category_type" in data:
        if data.get("category_type") not in CATEGORY_TYPES:
            return f"Categoria inválida. Opções: {', '.join(CATEGORY_TYPES)}"
    if not partial and data.get("price") is None:
        return "Preço obrigatório"

    for field in ("price", "cost"):
        if data.get(field) is not None:
            try:
                if float(data[field]) < 0:
                    return f"{field} não pode ser negativo"
            except (TypeError, ValueError):
                return f"{field} inválido"

    if data.get("stock") is not None:
        try:
            if int(data["stock"]) < 0:
                return "O stock não pode ser negativo"
        except (TypeError, ValueError):
            return "Stock inválido"

    if data.get("discount_percentage") is not None:
        try:
            discount = float(data["discount_percentage"])
        except (TypeError, ValueError):
            return "Desconto inválido"
        if discount < 0 or discount > 100:
            return "O desconto deve estar entre 0 e 100"

    if data.get("expiry_date"):
        try:
            _parse_date(data["expiry_date"])
        except (TypeError, ValueError):
            return "Data de validade inválida (use AAAA-MM-DD)"
    return None


@bp.route("", methods=["GET"])
@login_required
def get_supermarket_products():
    """Lista (filtros: category_type, featured=true)"""
    query = _user_products()
    category_type = request.args.get("category_type")
    if category_type:
        query = query.filter_by(category_type=category_type)
    if request.args.get("featured") == "true":
        query = query.filter_by(featured=True)
    return jsonify([p.to_dict() for p in query.order_by(SupermarketProduct.name).all()])


@bp.route("/categories", methods=["GET"])
def get_categories():
    return jsonify([{"value": k, "label": v} for k, v in CATEGORY_TYPES.items()])


@bp.route("/<int:id>", methods=["GET"])
@login_required
def get_supermarket_product(id):
    return jsonify(_user_products().filter_by(id=id).first_or_404().to_dict())


@bp.route("", methods=["POST"])
@login_required
def create_supermarket_product():
    data = request.json or {}
    error = _validate(data)
    if error:
        return jsonify({"error": error}), 400

    product = SupermarketProduct(
        user_id=g.current_user.id,
        name=data["name"].strip(),
        category_type=data["category_type"],
        price=float(data["price"]),
        cost=float(data.get("cost") or 0),
        stock=int(data.get("stock") or 0),
        description=data.get("description"),
        barcode=data.get("barcode"),
        expiry_date=_parse_date(data.get("expiry_date")),
        brand=data.get("brand"),
        unit=data.get("unit") or "unidade",
        discount_percentage=data.get("discount_percentage"),
        featured=bool(data.get("featured", False)),
    )
    db.session.add(product)
    db.session.commit()
    return jsonify(product.to_dict()), 201


@bp.route("/<int:id>", methods=["PUT"])
@login_required
def update_supermarket_product(id):
    product = _user_products().filter_by(id=id).first_or_404()
    data = request.json or {}
    error = _validate(data, partial=True)
    if error:
        return jsonify({"error": error}), 400

    for field in TEXT_FIELDS:
        if field in data:
            setattr(product, field, data[field])
    for field in ("price", "cost", "discount_percentage"):
        if data.get(field) is not None:
            setattr(product, field, float(data[field]))
    if data.get("stock") is not None:
        product.stock = int(data["stock"])
    if "expiry_date" in data:
        product.expiry_date = _parse_date(data["expiry_date"])

    db.session.commit()
    return jsonify(product.to_dict())


@bp.route("/<int:id>", methods=["DELETE"])
@login_required
def delete_supermarket_product(id):
    product = _user_products().filter_by(id=id).first_or_404()
    db.session.delete(product)
    db.session.commit()
    return jsonify({"message": "Produto eliminado"})
