import pytest

from moloja.db import db
from moloja.models import Product


@pytest.fixture
def sale(client, auth_headers, make_product):
    arroz = make_product(name="Arroz", price=500, stock=10)
    leite = make_product(name="Leite", price=1200, stock=5, category="Laticínios")
    response = client.post("/api/sales/checkout", headers=auth_headers, json={
        "items": [{"product_id": arroz.id, "quantity": 2}, {"product_id": leite.id, "quantity": 1}],
        "amount_paid": 3000,
        "payment_method": "Multicaixa",
        "customer": {"name": "Ana", "nif": "123", "ignored": "x"},
    })
    assert response.status_code == 201, response.get_json()
    return response.get_json()


class TestSalesApi:
    def test_checkout(self, sale):
        assert sale["total"] == 2200
        assert sale["change"] == 800
        assert sale["customer"] == {"name": "Ana", "nif": "123"}
        assert [i["name"] for i in sale["items"]] == ["Arroz", "Leite"]

    def test_checkout_reduces_stock(self, sale):
        arroz = db.session.get(Product, sale["items"][0]["product_id"])
        assert arroz.stock == 8

    def test_checkout_rejects_short_payment(self, client, auth_headers, make_product):
        product = make_product(price=500, stock=10)
        response = client.post("/api/sales/checkout", headers=auth_headers, json={
            "items": [{"product_id": product.id, "quantity": 1}], "amount_paid": 100,
        })
        assert response.status_code == 400
        assert "error" in response.get_json()

    def test_checkout_rejects_nan_payment(self, client, auth_headers, make_product):
        product = make_product(price=500, stock=10)
        body = '{"items": [{"product_id": %d, "quantity": 1}], "amount_paid": NaN}' % product.id
        response = client.post("/api/sales/checkout", headers=auth_headers,
                               data=body, content_type="application/json")
        assert response.status_code == 400
        assert db.session.get(Product, product.id).stock == 10

    def test_list_and_get(self, client, auth_headers, sale):
        sales = client.get("/api/sales", headers=auth_headers).get_json()
        assert [s["id"] for s in sales] == [sale["id"]]
        assert client.get(f"/api/sales/{sale['id']}", headers=auth_headers).get_json()["total"] == 2200

    def test_receipt_pdf(self, client, auth_headers, sale):
        response = client.get(f"/api/sales/{sale['id']}/receipt.pdf", headers=auth_headers)
        assert response.status_code == 200
        assert response.mimetype == "application/pdf"
        assert response.data.startswith(b"%PDF")
        assert f"recibo-{str(sale['id']).zfill(8)}-" in response.headers["Content-Disposition"]

    def test_clear_all_sales(self, client, auth_headers, sale):
        response = client.delete("/api/sales", headers=auth_headers)
        assert response.get_json() == {"deleted": 1}
        assert client.get("/api/sales", headers=auth_headers).get_json() == []

    def test_delete_keeps_products(self, client, auth_headers, sale):
        assert client.delete(f"/api/sales/{sale['id']}", headers=auth_headers).status_code == 200
        assert db.session.get(Product, sale["items"][0]["product_id"]) is not None


class TestExpensesApi:
    def test_create_and_list(self, client, auth_headers):
        response = client.post("/api/expenses", headers=auth_headers,
                               json={"description": "Renda de maio", "category": "Renda", "amount": 50000})
        assert response.status_code == 201

        body = client.get("/api/expenses", headers=auth_headers).get_json()
        assert body["total"] == 50000
        assert body["expenses"][0]["description"] == "Renda de maio"

    @pytest.mark.parametrize("amount", [0, -10, "abc"])
    def test_amount_must_be_positive(self, client, auth_headers, amount):
        response = client.post("/api/expenses", headers=auth_headers,
                               json={"description": "x", "category": "Outros", "amount": amount})
        assert response.status_code == 400

    def test_update_and_delete(self, client, auth_headers):
        expense_id = client.post("/api/expenses", headers=auth_headers, json={
            "description": "Luz", "category": "Energia", "amount": 8000,
        }).get_json()["id"]

        response = client.put(f"/api/expenses/{expense_id}", headers=auth_headers, json={"amount": 9000})
        assert response.get_json()["amount"] == 9000

        assert client.delete(f"/api/expenses/{expense_id}", headers=auth_headers).status_code == 200
        assert client.get(f"/api/expenses/{expense_id}", headers=auth_headers).status_code == 404


class TestCreditNotesApi:
    def test_full_return(self, client, auth_headers, sale):
        response = client.post("/api/credit-notes", headers=auth_headers,
                               json={"original_sale_id": sale["id"], "reason": "Produto danificado"})
        assert response.status_code == 201
        note = response.get_json()
        assert note["status"] == "pending"
        assert note["total"] == 2200
        assert len(note["items"]) == 2

    def test_partial_return(self, client, auth_headers, sale):
        arroz_item = sale["items"][0]
        response = client.post("/api/credit-notes", headers=auth_headers, json={
            "original_sale_id": sale["id"],
            "reason": "Troca",
            "items": [{"sale_item_id": arroz_item["id"], "quantity": 1}],
        })
        assert response.status_code == 201
        assert response.get_json()["total"] == 500

    def test_quantity_above_sold_is_rejected(self, client, auth_headers, sale):
        response = client.post("/api/credit-notes", headers=auth_headers, json={
            "original_sale_id": sale["id"],
            "reason": "Troca",
            "items": [{"sale_item_id": sale["items"][0]["id"], "quantity": 5}],
        })
        assert response.status_code == 400

    def test_sale_cannot_be_refunded_twice(self, client, auth_headers, sale):
        body = {"original_sale_id": sale["id"], "reason": "Devolução"}
        assert client.post("/api/credit-notes", headers=auth_headers, json=body).status_code == 201
        assert client.post("/api/credit-notes", headers=auth_headers, json=body).status_code == 409

        notes = client.get("/api/credit-notes", headers=auth_headers).get_json()
        assert sum(n["total"] for n in notes) == 2200

    def test_full_return_after_partial_covers_the_rest(self, client, auth_headers, sale):
        arroz_item = sale["items"][0]
        client.post("/api/credit-notes", headers=auth_headers, json={
            "original_sale_id": sale["id"],
            "reason": "Troca",
            "items": [{"sale_item_id": arroz_item["id"], "quantity": 1}],
        })

        response = client.post("/api/credit-notes", headers=auth_headers,
                               json={"original_sale_id": sale["id"], "reason": "Devolução"})
        assert response.status_code == 201
        note = response.get_json()
        assert note["total"] == 1700
        assert [(i["name"], i["quantity"]) for i in note["items"]] == [("Arroz", 1), ("Leite", 1)]

    def test_returned_quantity_is_discounted(self, client, auth_headers, sale):
        arroz_item = sale["items"][0]
        body = {
            "original_sale_id": sale["id"],
            "reason": "Troca",
            "items": [{"sale_item_id": arroz_item["id"], "quantity": 2}],
        }
        assert client.post("/api/credit-notes", headers=auth_headers, json=body).status_code == 201

        body["items"][0]["quantity"] = 1
        assert client.post("/api/credit-notes", headers=auth_headers, json=body).status_code == 400

    def test_repeated_item_is_rejected(self, client, auth_headers, sale):
        arroz_item = sale["items"][0]
        response = client.post("/api/credit-notes", headers=auth_headers, json={
            "original_sale_id": sale["id"],
            "reason": "Troca",
            "items": [
                {"sale_item_id": arroz_item["id"], "quantity": 1},
                {"sale_item_id": arroz_item["id"], "quantity": 1},
            ],
        })
        assert response.status_code == 400

    def test_rejected_note_frees_the_sale(self, client, auth_headers, sale):
        body = {"original_sale_id": sale["id"], "reason": "Devolução"}
        note = client.post("/api/credit-notes", headers=auth_headers, json=body).get_json()
        client.post(f"/api/credit-notes/{note['id']}/reject", headers=auth_headers)

        response = client.post("/api/credit-notes", headers=auth_headers, json=body)
        assert response.status_code == 201
        assert response.get_json()["total"] == 2200

    def test_reason_too_short(self, client, auth_headers, sale):
        response = client.post("/api/credit-notes", headers=auth_headers,
                               json={"original_sale_id": sale["id"], "reason": "ok"})
        assert response.status_code == 400

    def test_unknown_sale(self, client, auth_headers):
        response = client.post("/api/credit-notes", headers=auth_headers,
                               json={"original_sale_id": 999, "reason": "Devolução"})
        assert response.status_code == 404

    def test_status_changes_only_from_pending(self, client, auth_headers, sale):
        note = client.post("/api/credit-notes", headers=auth_headers,
                           json={"original_sale_id": sale["id"], "reason": "Devolução"}).get_json()

        response = client.post(f"/api/credit-notes/{note['id']}/approve", headers=auth_headers)
        assert response.get_json()["status"] == "approved"

        assert client.post(f"/api/credit-notes/{note['id']}/reject", headers=auth_headers).status_code == 409
        assert client.post(f"/api/credit-notes/{note['id']}/approve", headers=auth_headers).status_code == 409

    def test_sale_with_credit_note_cannot_be_deleted(self, client, auth_headers, sale):
        client.post("/api/credit-notes", headers=auth_headers,
                    json={"original_sale_id": sale["id"], "reason": "Devolução"})
        assert client.delete(f"/api/sales/{sale['id']}", headers=auth_headers).status_code == 409

        assert client.delete("/api/sales", headers=auth_headers).get_json() == {"deleted": 1}
        assert client.get("/api/credit-notes", headers=auth_headers).get_json() == []

    def test_list_by_sale(self, client, auth_headers, sale):
        client.post("/api/credit-notes", headers=auth_headers,
                    json={"original_sale_id": sale["id"], "reason": "Devolução"})
        notes = client.get(f"/api/credit-notes/by-sale/{sale['id']}", headers=auth_headers).get_json()
        assert len(notes) == 1
        assert notes[0]["original_sale_id"] == sale["id"]
