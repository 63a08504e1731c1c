import pytest

from moloja.db import db
from moloja.models import Product, Sale
from moloja.services.cart import Cart, calculate_change, checkout


class TestCart:
    arroz = {"id": 1, "name": "Arroz", "price": 500, "stock": 3}
    leite = {"id": 2, "name": "Leite", "price": 1200, "stock": 1}

    def test_add_increments_quantity(self):
        cart = Cart().add_item(self.arroz).add_item(self.arroz).add_item(self.leite)
        assert cart.total_items == 3
        assert cart.total_price == 2200

    def test_out_of_stock_rejected(self):
        with pytest.raises(ValueError):
            Cart().add_item({"id": 3, "name": "Feijão", "price": 800, "stock": 0})

    def test_update_quantity_to_zero_removes(self):
        cart = Cart().add_item(self.arroz)
        cart.update_quantity(1, 0)
        assert cart.items == []

    def test_checkout_items(self):
        cart = Cart().add_item(self.arroz).add_item(self.arroz)
        assert cart.to_checkout_items() == [{"product_id": 1, "quantity": 2}]


def test_calculate_change():
    assert calculate_change(1500, 2000) == 500
    assert calculate_change(1500, 1000) == 0


class TestCheckout:
    def test_creates_sale_and_reduces_stock(self, user, make_product):
        arroz = make_product(name="Arroz", price=500, stock=10)
        leite = make_product(name="Leite", price=1200, stock=2, category="Laticínios")

        sale = checkout(
            user,
            [{"product_id": arroz.id, "quantity": 3}, {"product_id": leite.id, "quantity": 2}],
            amount_paid=5000,
            customer={"name": "Ana"},
        )

        assert sale.total == 3900
        assert sale.change == 1100
        assert sale.customer_name == "Ana"
        assert [(i.name, i.quantity, i.unit_price) for i in sale.items] == [("Arroz", 3, 500), ("Leite", 2, 1200)]
        assert db.session.get(Product, arroz.id).stock == 7
        assert db.session.get(Product, leite.id).stock == 0

    def test_insufficient_payment(self, user, make_product):
        arroz = make_product(price=500, stock=10)
        with pytest.raises(ValueError, match="inferior"):
            checkout(user, [{"product_id": arroz.id, "quantity": 2}], amount_paid=900)
        assert Sale.query.count() == 0
        assert db.session.get(Product, arroz.id).stock == 10

    def test_insufficient_stock(self, user, make_product):
        arroz = make_product(stock=1)
        with pytest.raises(ValueError, match="Stock insuficiente"):
            checkout(user, [{"product_id": arroz.id, "quantity": 2}], amount_paid=10000)

    def test_repeated_lines_count_against_stock(self, user, make_product):
        arroz = make_product(price=500, stock=5)
        lines = [{"product_id": arroz.id, "quantity": 3}, {"product_id": arroz.id, "quantity": 3}]
        with pytest.raises(ValueError, match="Stock insuficiente"):
            checkout(user, lines, amount_paid=10000)
        assert Sale.query.count() == 0
        assert db.session.get(Product, arroz.id).stock == 5

    def test_repeated_lines_are_merged(self, user, make_product):
        arroz = make_product(price=500, stock=5)
        lines = [{"product_id": arroz.id, "quantity": 2}, {"product_id": arroz.id, "quantity": 3}]
        sale = checkout(user, lines, amount_paid=2500)
        assert [(i.product_id, i.quantity) for i in sale.items] == [(arroz.id, 5)]
        assert db.session.get(Product, arroz.id).stock == 0

    @pytest.mark.parametrize("amount_paid", [float("nan"), float("inf"), "abc", None])
    def test_invalid_payment_amount(self, user, make_product, amount_paid):
        arroz = make_product(price=500, stock=5)
        with pytest.raises(ValueError, match="Valor pago inválido"):
            checkout(user, [{"product_id": arroz.id, "quantity": 1}], amount_paid=amount_paid)

    def test_empty_cart(self, user):
        with pytest.raises(ValueError):
            checkout(user, [], amount_paid=0)

    def test_other_users_products_are_invisible(self, user, register, make_product):
        arroz = make_product()
        register(email="outra@moloja.ao")
        other = type(user).query.filter_by(email="outra@moloja.ao").first()
        with pytest.raises(ValueError, match="não encontrado"):
            checkout(other, [{"product_id": arroz.id, "quantity": 1}], amount_paid=1000)
