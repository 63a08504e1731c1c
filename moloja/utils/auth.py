"""
Utilidade: Tokens JWT e decorator login_required
"""
import datetime
from functools import wraps

import jwt
from flask import current_app, g, jsonify, request

from ..db import db


def create_token(user):
    """Token HS256 com o id e email do utilizador"""
    days = current_app.config.get("JWT_EXPIRATION_DAYS", 7)
    return jwt.encode(
        {
            "sub": str(user.id),
            "email": user.email,
            "exp": datetime.datetime.utcnow() + datetime.timedelta(days=days),
        },
        current_app.config.get("SECRET_KEY"),
        algorithm="HS256",
    )


def decode_token(token):
    """Payload do token; levanta jwt.InvalidTokenError se inválido ou expirado"""
    return jwt.decode(token, current_app.config.get("SECRET_KEY"), algorithms=["HS256"])


def get_current_user():
    """Utilizador do header Authorization: Bearer <token>, ou None"""
    from ..models import User

    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None

    try:
        payload = decode_token(auth_header.split(" ", 1)[1])
        user_id = int(payload["sub"])
    except (jwt.InvalidTokenError, KeyError, ValueError):
        return None

    return db.session.get(User, user_id)


def login_required(f):
    """Exige token válido; o utilizador fica em g.current_user"""
    @wraps(f)
    def decorated(*args, **kwargs):
        user = get_current_user()
        if user is None:
            return jsonify({"error": "Não autenticado"}), 401
        g.current_user = user
        return f(*args, **kwargs)
    return decorated
