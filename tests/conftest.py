"""
Fixtures partilhadas: app de testes, cliente HTTP e utilizador autenticado
"""
import os

os.environ["FLASK_ENV"] = "testing"

import pytest

from moloja.db import db
from moloja.models import Product, User
from wsgi import create_app


@pytest.fixture
def app(tmp_path):
    app = create_app("testing")
    app.config["OFFLINE_STORE_PATH"] = str(tmp_path / "offline.db")
    app.config["UPLOAD_FOLDER"] = str(tmp_path / "uploads")

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register(client):
    """Regista um utilizador e devolve os headers com o token"""
    def _register(email="loja@moloja.ao", password="segredo123", name="Loja Teste"):
        response = client.post("/api/auth/register", json={"email": email, "password": password, "name": name})
        assert response.status_code == 201, response.get_json()
        return {"Authorization": f"Bearer {response.get_json()['token']}"}
    return _register


@pytest.fixture
def auth_headers(register):
    return register()


@pytest.fixture
def user(app, auth_headers):
    return User.query.filter_by(email="loja@moloja.ao").first()


@pytest.fixture
def make_product(user):
    """Cria um produto do utilizador autenticado"""
    def _make(name="Arroz 1kg", price=500, stock=20, category="Alimentos Básicos", code=None, purchase_price=300):
        product = Product(user_id=user.id, name=name, price=price, stock=stock, category=category,
                          code=code, purchase_price=purchase_price)
        db.session.add(product)
        db.session.commit()
        return product
    return _make
