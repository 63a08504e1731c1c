"""
API: Produtos
CRUD, pesquisa paginada, importação por texto e imagens
"""
import logging
import traceback

from flask import Blueprint, current_app, g, jsonify, request

from ..db import db
from ..models import Product
from ..services.product_importer import parse_product_text
from ..services.product_search import (
    LOAD_MORE_STEP,
    SearchWindow,
    search_products_with_alternatives,
)
from ..utils.auth import login_required
from ..utils.cloud_storage import delete_file, upload_file
from ..utils.text_match import containment_score

logger = logging.getLogger(__name__)

bp = Blueprint("products", __name__)

NUMERIC_FIELDS = ("price", "purchase_price", "profit_margin")


def _user_products():
    return Product.query.filter_by(user_id=g.current_user.id)


def _validate(data, partial=False):
    """Mensagem de erro ou None"""
    if not partial or "name" in data:
        if not (data.get("name") or "").strip():
            return "Nome obrigatório"
    if not partial and data.get("price") is None:
        return "Preço obrigatório"

    for field in NUMERIC_FIELDS:
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
    return None


@bp.route("", methods=["GET"])
@login_required
def get_products():
    """Lista os produtos (filtro opcional por categoria)"""
    query = _user_products()
    category = request.args.get("category")
    if category:
        query = query.filter_by(category=category)
    products = query.order_by(Product.name).all()
    return jsonify([p.to_dict() for p in products])


@bp.route("/search", methods=["GET"])
@login_required
def search_products():
    """
    Pesquisa por todos os termos em nome, código ou categoria.
    page=n devolve os primeiros 20 + 8*n resultados.
    """
    q = request.args.get("q", "")
    try:
        page = max(0, int(request.args.get("page", 0)))
    except ValueError:
        return jsonify({"error": "page inválido"}), 400

    window = SearchWindow(_user_products().order_by(Product.name).all(), q)
    for _ in range(page):
        if not window.load_more():
            break

    return jsonify({
        "query": q,
        "page": page,
        "items": [p.to_dict() for p in window.visible],
        "total": len(window.filtered),
        "has_more": window.has_more,
        "step": LOAD_MORE_STEP,
    })


@bp.route("/search-alternatives", methods=["POST"])
@login_required
def search_alternatives():
    """Pesquisa com vários termos (ex: variações da transcrição)"""
    terms = (request.json or {}).get("terms") or []
    if not isinstance(terms, list):
        return jsonify({"error": "terms deve ser uma lista"}), 400
    results = search_products_with_alternatives(_user_products().all(), terms)
    return jsonify([p.to_dict() for p in results])


@bp.route("/suggest", methods=["GET"])
@login_required
def suggest_products():
    """Sugestões por semelhança com o texto"""
    q = request.args.get("q", "").strip()
    if len(q) < 2:
        return jsonify([])

    suggestions = []
    for product in _user_products().all():
        score = containment_score(q, product.name)
        if score >= 0.3:
            suggestions.append({**product.to_dict(), "score": round(score, 3)})

    suggestions.sort(key=lambda s: s["score"], reverse=True)
    return jsonify(suggestions[:10])


@bp.route("/<int:id>", methods=["GET"])
@login_required
def get_product(id):
    product = _user_products().filter_by(id=id).first_or_404()
    return jsonify(product.to_dict())


@bp.route("", methods=["POST"])
@login_required
def create_product():
    """Cria um produto"""
    data = request.json or {}
    error = _validate(data)
    if error:
        return jsonify({"error": error}), 400

    product = Product(
        user_id=g.current_user.id,
        name=data["name"].strip(),
        code=data.get("code"),
        category=data.get("category") or "Outros",
        description=data.get("description"),
        image=data.get("image"),
        price=float(data["price"]),
        purchase_price=float(data.get("purchase_price") or 0),
        profit_margin=data.get("profit_margin"),
        stock=int(data.get("stock") or 0),
        is_public=bool(data.get("is_public", False)),
    )
    db.session.add(product)
    db.session.commit()

    return jsonify(product.to_dict()), 201


@bp.route("/<int:id>", methods=["PUT"])
@login_required
def update_product(id):
    product = _user_products().filter_by(id=id).first_or_404()
    data = request.json or {}
    error = _validate(data, partial=True)
    if error:
        return jsonify({"error": error}), 400

    for field in ("name", "code", "category", "description", "image", "profit_margin", "is_public"):
        if field in data:
            setattr(product, field, data[field])
    if data.get("price") is not None:
        product.price = float(data["price"])
    if data.get("purchase_price") is not None:
        product.purchase_price = float(data["purchase_price"])
    if data.get("stock") is not None:
        product.stock = int(data["stock"])

    db.session.commit()
    return jsonify(product.to_dict())


@bp.route("/<int:id>", methods=["DELETE"])
@login_required
def delete_product(id):
    """Apaga o produto (as vendas guardam o nome e o preço)"""
    product = _user_products().filter_by(id=id).first_or_404()
    if product.image:
        delete_file(product.image)
    db.session.delete(product)
    db.session.commit()
    return jsonify({"message": "Produto eliminado"})


@bp.route("/import", methods=["POST"])
@login_required
def import_products():
    """Importa produtos no formato 'Nome (1 234,56 AOA);'"""
    text = (request.json or {}).get("text") or ""
    parsed = parse_product_text(text)
    if not parsed:
        return jsonify({"error": "Nenhum produto reconhecido no texto"}), 400

    products = [
        Product(user_id=g.current_user.id, name=p["name"], price=p["price"], category=p["category"],
                stock=0, is_public=True)
        for p in parsed
    ]
    db.session.add_all(products)
    db.session.commit()

    logger.info("📥 %d produtos importados", len(products))
    return jsonify({"imported": len(products), "products": [p.to_dict() for p in products]}), 201


@bp.route("/<int:id>/image", methods=["POST"])
@login_required
def upload_image(id):
    """Envia a imagem do produto (Cloud Storage ou local)"""
    product = _user_products().filter_by(id=id).first_or_404()

    if "file" not in request.files:
        return jsonify({"error": "Nenhum ficheiro enviado"}), 400

    file = request.files["file"]
    if file.filename == "":
        return jsonify({"error": "Ficheiro vazio"}), 400

    extension = file.filename.rsplit(".", 1)[-1].lower() if "." in file.filename else ""
    if extension not in current_app.config["ALLOWED_EXTENSIONS"]:
        return jsonify({"error": "Formato de imagem não suportado"}), 400

    try:
        if product.image:
            delete_file(product.image)

        image_url = upload_file(file, folder=f"products/{product.id}")
        if not image_url:
            return jsonify({"error": "Não foi possível guardar a imagem"}), 500

        product.image = image_url
        db.session.commit()
        return jsonify({"image": image_url})
    except Exception as e:
        logger.error("Erro ao enviar imagem: %s\n%s", e, traceback.format_exc())
        return jsonify({"error": f"Erro ao enviar ficheiro: {str(e)}"}), 500


@bp.route("/<int:id>/image", methods=["DELETE"])
@login_required
def delete_image(id):
    product = _user_products().filter_by(id=id).first_or_404()
    if not product.image:
        return jsonify({"error": "O produto não tem imagem"}), 400

    delete_file(product.image)
    product.image = None
    db.session.commit()
    return jsonify({"message": "Imagem eliminada"})
