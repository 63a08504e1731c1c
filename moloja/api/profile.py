"""
API: Perfil
Dados da empresa, personalização do recibo e escolha do módulo
"""
from flask import Blueprint, g, jsonify, request

from ..db import db
from ..models.user import MODULES
from ..services.sample_data import import_sample_data
from ..utils.auth import login_required

bp = Blueprint("profile", __name__)

EDITABLE_FIELDS = (
    "name", "phone", "address", "position", "avatar_url",
    "tax_id", "currency", "tax_rate", "profit_rate",
    "receipt_title", "receipt_message", "receipt_footer_text", "receipt_additional_info",
    "receipt_logo", "receipt_show_logo", "receipt_show_signature",
    "company_neighborhood", "company_city", "company_social_media",
)

RATE_FIELDS = ("tax_rate", "profit_rate")


@bp.route("", methods=["GET"])
@login_required
def get_profile():
    return jsonify(g.current_user.to_dict())


@bp.route("", methods=["PUT"])
@login_required
def update_profile():
    """Actualiza os campos enviados"""
    data = request.json or {}
    user = g.current_user

    for field in RATE_FIELDS:
        if data.get(field) is not None:
            try:
                value = float(data[field])
            except (TypeError, ValueError):
                return jsonify({"error": f"{field} inválido"}), 400
            if value < 0 or value > 100:
                return jsonify({"error": f"{field} deve estar entre 0 e 100"}), 400
            data[field] = value

    for field in EDITABLE_FIELDS:
        if field in data:
            setattr(user, field, data[field])

    db.session.commit()
    return jsonify(user.to_dict())


@bp.route("/module", methods=["POST"])
@login_required
def select_module():
    """Escolhe o módulo e importa o catálogo de exemplo (uma vez)"""
    module = (request.json or {}).get("module")
    if module not in MODULES:
        return jsonify({"error": f"Módulo inválido. Opções: {', '.join(MODULES)}"}), 400

    user = g.current_user
    user.module = module
    db.session.commit()

    result = import_sample_data(user, module)
    return jsonify({"profile": user.to_dict(), "sample_data": result})
