"""
API: Autenticação
Registo, login com email e senha (JWT), verificação e troca de senha
"""
import logging

from flask import Blueprint, g, jsonify, request

from ..db import db
from ..models import User
from ..utils.auth import create_token, get_current_user, login_required

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__)

MIN_PASSWORD_LENGTH = 6


@bp.route("/register", methods=["POST"])
def register():
    """Cria uma conta nova"""
    data = request.json or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    if not email or "@" not in email:
        return jsonify({"error": "Email inválido"}), 400
    if len(password) < MIN_PASSWORD_LENGTH:
        return jsonify({"error": f"A senha deve ter pelo menos {MIN_PASSWORD_LENGTH} caracteres"}), 400
    if User.query.filter_by(email=email).first():
        return jsonify({"error": "Já existe uma conta com este email"}), 409

    user = User(email=email, name=data.get("name"), phone=data.get("phone"))
    user.set_password(password)
    db.session.add(user)
    db.session.commit()

    logger.info("👤 Nova conta registada: %s", email)
    return jsonify({"token": create_token(user), "user": user.to_dict()}), 201


@bp.route("/login", methods=["POST"])
def login():
    """Login com email e senha"""
    data = request.json or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(password):
        logger.info("Tentativa de login falhada para %s", email)
        return jsonify({"error": "Email ou senha incorretos"}), 401

    return jsonify({"token": create_token(user), "user": user.to_dict()})


@bp.route("/verify", methods=["GET"])
def verify():
    """Verifica se o token é válido"""
    user = get_current_user()
    if user is None:
        return jsonify({"valid": False}), 401
    return jsonify({"valid": True, "user": user.to_dict()})


@bp.route("/change-password", methods=["POST"])
@login_required
def change_password():
    data = request.json or {}
    user = g.current_user

    if not user.check_password(data.get("current_password") or ""):
        return jsonify({"error": "Senha actual incorreta"}), 400

    new_password = data.get("new_password") or ""
    if len(new_password) < MIN_PASSWORD_LENGTH:
        return jsonify({"error": f"A senha deve ter pelo menos {MIN_PASSWORD_LENGTH} caracteres"}), 400

    user.set_password(new_password)
    user.needs_password_change = False
    db.session.commit()

    return jsonify({"message": "Senha alterada com sucesso"})
