"""
Moloja - Aplicação Flask principal
POS e inventário para o pequeno comércio angolano
"""
import logging
import os

from flask import Flask, jsonify
from flask_cors import CORS

from moloja.config import get_config
from moloja.db import db, init_db


def configure_logging(app):
    """Nível a partir de LOG_LEVEL; um único handler na raiz"""
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    logging.getLogger("moloja").setLevel(level)
    app.logger.setLevel(level)


def create_app(config_name=None):
    """Factory para criar a aplicação Flask"""
    app = Flask(__name__)

    # Carregar configuração
    app.config.from_object(get_config(config_name))
    configure_logging(app)

    app.logger.debug("📍 Database URI: %s", app.config["SQLALCHEMY_DATABASE_URI"])

    # Habilitar CORS
    # Em produção, indicar os domínios permitidos
    allowed_origins = app.config["ALLOWED_ORIGINS"].split(",")
    if "*" in allowed_origins:
        CORS(app, resources={r"/api/*": {
            "origins": "*",
            "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"]
        }})
    else:
        CORS(app, resources={r"/api/*": {
            "origins": [o.strip() for o in allowed_origins],
            "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"],
            "supports_credentials": True
        }})

    # Criar pasta instance se não existir
    os.makedirs(os.path.join(os.path.dirname(os.path.abspath(__file__)), "instance"), exist_ok=True)

    # Importar modelos antes de criar as tabelas
    import moloja.models  # noqa: F401

    init_db(app)

    with app.app_context():
        # Dados de demonstração em desenvolvimento
        if app.config["FLASK_ENV"] == "development":
            init_dev_data(app)

    # Registar blueprints das APIs
    from moloja.api import (
        auth_bp, profile_bp, products_bp, meat_cuts_bp, supermarket_products_bp,
        sales_bp, expenses_bp, credit_notes_bp, dashboard_bp, reports_bp,
        voice_bp, voice_order_lists_bp, images_bp
    )

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(profile_bp, url_prefix="/api/profile")
    app.register_blueprint(products_bp, url_prefix="/api/products")
    app.register_blueprint(meat_cuts_bp, url_prefix="/api/meat-cuts")
    app.register_blueprint(supermarket_products_bp, url_prefix="/api/supermarket-products")
    app.register_blueprint(sales_bp, url_prefix="/api/sales")
    app.register_blueprint(expenses_bp, url_prefix="/api/expenses")
    app.register_blueprint(credit_notes_bp, url_prefix="/api/credit-notes")
    app.register_blueprint(dashboard_bp, url_prefix="/api/dashboard")
    app.register_blueprint(reports_bp, url_prefix="/api/reports")
    app.register_blueprint(voice_bp, url_prefix="/api/voice")
    app.register_blueprint(voice_order_lists_bp, url_prefix="/api/voice-order-lists")
    app.register_blueprint(images_bp, url_prefix="/api/images")

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Não encontrado"}), 404

    @app.errorhandler(413)
    def too_large(e):
        return jsonify({"error": "Ficheiro demasiado grande"}), 413

    @app.errorhandler(500)
    def server_error(e):
        app.logger.exception("Erro interno")
        return jsonify({"error": "Erro interno do servidor"}), 500

    # Health check
    @app.route("/health")
    def health():
        return {"status": "ok", "message": "Moloja is running! 🛒"}

    return app


def init_dev_data(app):
    """Cria o utilizador de demonstração"""
    from moloja.models import User

    email = app.config["ADMIN_EMAIL"]
    if User.query.filter_by(email=email).first():
        return

    app.logger.info("🌱 A criar utilizador de demonstração...")

    user = User(email=email, name="Administrador", role="admin", needs_password_change=True,
                currency=app.config["DEFAULT_CURRENCY"])
    user.set_password(app.config["ADMIN_PASSWORD"])
    db.session.add(user)
    db.session.commit()

    app.logger.info("✅ Utilizador %s criado", email)


# Criar instância da app para o gunicorn
app = create_app()

if __name__ == "__main__":
    app.run(debug=True, host="0.0.0.0", port=5000)
