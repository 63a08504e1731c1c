import io

from moloja.db import db
from moloja.models import Product


class TestProductsApi:
    def test_crud(self, client, auth_headers):
        response = client.post("/api/products", headers=auth_headers,
                               json={"name": "Arroz 1kg", "price": 500, "stock": 10, "category": "Alimentos Básicos"})
        assert response.status_code == 201
        product_id = response.get_json()["id"]

        response = client.put(f"/api/products/{product_id}", headers=auth_headers, json={"price": 550})
        assert response.get_json()["price"] == 550

        assert client.get(f"/api/products/{product_id}", headers=auth_headers).status_code == 200

        response = client.delete(f"/api/products/{product_id}", headers=auth_headers)
        assert response.status_code == 200
        assert client.get(f"/api/products/{product_id}", headers=auth_headers).status_code == 404

    def test_validation(self, client, auth_headers):
        assert client.post("/api/products", headers=auth_headers, json={"price": 10}).status_code == 400
        response = client.post("/api/products", headers=auth_headers, json={"name": "X", "price": 10, "stock": -1})
        assert response.status_code == 400

    def test_products_are_private(self, client, auth_headers, register, make_product):
        product = make_product()
        other = register(email="outra@moloja.ao")
        assert client.get(f"/api/products/{product.id}", headers=other).status_code == 404
        assert client.get("/api/products", headers=other).get_json() == []

    def test_search_pagination(self, client, auth_headers, make_product):
        for i in range(30):
            make_product(name=f"Bolacha {i:02d}", category="Bolachas e Snacks")
        make_product(name="Leite", category="Laticínios")

        first = client.get("/api/products/search?q=bolacha", headers=auth_headers).get_json()
        assert first["total"] == 30
        assert len(first["items"]) == 20
        assert first["has_more"] is True

        second = client.get("/api/products/search?q=bolacha&page=2", headers=auth_headers).get_json()
        assert len(second["items"]) == 30
        assert second["has_more"] is False

    def test_suggest(self, client, auth_headers, make_product):
        make_product(name="Leite Nido")
        make_product(name="Arroz")
        suggestions = client.get("/api/products/suggest?q=leite", headers=auth_headers).get_json()
        assert [s["name"] for s in suggestions] == ["Leite Nido"]

    def test_import(self, client, auth_headers):
        text = "Arroz Tio Lucas 5kg (4 500,00 AOA); linha inválida; Leite Nido (1.200,50 AOA);"
        response = client.post("/api/products/import", headers=auth_headers, json={"text": text})
        assert response.status_code == 201
        body = response.get_json()
        assert body["imported"] == 2
        by_name = {p["name"]: p for p in body["products"]}
        assert by_name["Arroz Tio Lucas 5kg"]["price"] == 4500
        assert by_name["Arroz Tio Lucas 5kg"]["category"] == "Alimentos Básicos"
        assert by_name["Leite Nido"]["price"] == 1200.5

    def test_import_nothing_recognised(self, client, auth_headers):
        response = client.post("/api/products/import", headers=auth_headers, json={"text": "nada aqui"})
        assert response.status_code == 400

    def test_image_upload_and_delete(self, client, auth_headers, make_product, app):
        product = make_product()
        data = {"file": (io.BytesIO(b"\x89PNG fake"), "foto.png")}
        response = client.post(f"/api/products/{product.id}/image", headers=auth_headers,
                               data=data, content_type="multipart/form-data")
        assert response.status_code == 200
        image_url = response.get_json()["image"]
        assert image_url.startswith(f"/api/images/products/{product.id}/")

        served = client.get(image_url)
        assert served.status_code == 200
        assert served.data == b"\x89PNG fake"

        response = client.delete(f"/api/products/{product.id}/image", headers=auth_headers)
        assert response.status_code == 200
        assert db.session.get(Product, product.id).image is None
        assert client.get(image_url).status_code == 404

    def test_image_rejects_unknown_extension(self, client, auth_headers, make_product):
        product = make_product()
        data = {"file": (io.BytesIO(b"x"), "script.exe")}
        response = client.post(f"/api/products/{product.id}/image", headers=auth_headers,
                               data=data, content_type="multipart/form-data")
        assert response.status_code == 400


class TestCatalogueModules:
    def test_meat_cuts(self, client, auth_headers):
        response = client.post("/api/meat-cuts", headers=auth_headers,
                               json={"name": "Picanha", "animal_type": "beef", "price_per_kg": 4200})
        assert response.status_code == 201
        assert response.get_json()["animal_label"] == "Bovino"

        bad = client.post("/api/meat-cuts", headers=auth_headers,
                          json={"name": "X", "animal_type": "dragon", "price_per_kg": 1})
        assert bad.status_code == 400

    def test_supermarket_products(self, client, auth_headers):
        response = client.post("/api/supermarket-products", headers=auth_headers, json={
            "name": "Leite UHT", "category_type": "dairy", "price": 1000,
            "discount_percentage": 10, "expiry_date": "2030-01-31",
        })
        assert response.status_code == 201
        body = response.get_json()
        assert body["final_price"] == 900
        assert body["expiry_date"] == "2030-01-31"

        bad = client.post("/api/supermarket-products", headers=auth_headers, json={
            "name": "X", "category_type": "dairy", "price": 10, "discount_percentage": 120,
        })
        assert bad.status_code == 400
