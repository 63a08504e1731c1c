"""
Configuração da base de dados
"""
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def init_db(app):
    """Inicializa a base de dados com a app Flask"""
    db.init_app(app)

    with app.app_context():
        db.create_all()
        app.logger.info("✅ Base de dados inicializada")
