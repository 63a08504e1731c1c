"""
Serviço: Carrinho e finalização de venda (checkout)
"""
import logging
import math
from datetime import datetime
from typing import Dict, List, Optional

from ..db import db
from ..models import Product, Sale, SaleItem

logger = logging.getLogger(__name__)


def _get(product, name, default=None):
    if isinstance(product, dict):
        return product.get(name, default)
    return getattr(product, name, default)


class Cart:
    """Carrinho em memória: lista de {product, quantity}"""

    def __init__(self):
        self.items: List[Dict] = []

    def _find(self, product_id):
        for item in self.items:
            if _get(item["product"], "id") == product_id:
                return item
        return None

    def add_item(self, product):
        """Adiciona uma unidade; produtos sem stock são recusados"""
        if (_get(product, "stock") or 0) <= 0:
            raise ValueError(f"Produto sem stock: {_get(product, 'name')}")

        item = self._find(_get(product, "id"))
        if item:
            item["quantity"] += 1
        else:
            self.items.append({"product": product, "quantity": 1})
        return self

    def remove_item(self, product_id):
        self.items = [i for i in self.items if _get(i["product"], "id") != product_id]
        return self

    def update_quantity(self, product_id, quantity):
        """Quantidade <= 0 remove o item"""
        if quantity <= 0:
            return self.remove_item(product_id)
        item = self._find(product_id)
        if item:
            item["quantity"] = quantity
        return self

    def clear(self):
        self.items = []
        return self

    @property
    def total_items(self) -> int:
        return sum(i["quantity"] for i in self.items)

    @property
    def total_price(self) -> float:
        return round(sum((_get(i["product"], "price") or 0) * i["quantity"] for i in self.items), 2)

    def to_checkout_items(self) -> List[Dict]:
        return [{"product_id": _get(i["product"], "id"), "quantity": i["quantity"]} for i in self.items]


def calculate_change(total, amount_paid) -> float:
    """Troco a devolver (nunca negativo)"""
    return round(max(0.0, float(amount_paid or 0) - float(total or 0)), 2)


def checkout(user, items, amount_paid, customer: Optional[Dict] = None, notes=None,
             payment_method="Dinheiro", date=None) -> Sale:
    """
    Cria a venda com os itens e baixa o stock numa só transação.

    Args:
        items: [{"product_id": int, "quantity": int}]

    Raises:
        ValueError: carrinho vazio, produto inexistente, quantidade inválida,
                    stock insuficiente ou pagamento inferior ao total
    """
    if not items:
        raise ValueError("O carrinho está vazio")

    # Linhas repetidas do mesmo produto somam-se antes de validar o stock
    quantities: Dict = {}
    for entry in items:
        product_id = entry.get("product_id")
        try:
            quantity = int(entry.get("quantity") or 0)
        except (TypeError, ValueError):
            raise ValueError("Quantidade inválida")

        if quantity <= 0:
            raise ValueError("A quantidade deve ser maior que zero")

        quantities[product_id] = quantities.get(product_id, 0) + quantity

    lines = []
    total = 0.0
    for product_id, quantity in quantities.items():
        product = Product.query.filter_by(id=product_id, user_id=user.id).first()
        if not product:
            raise ValueError(f"Produto não encontrado: {product_id}")

        if quantity > product.stock:
            raise ValueError(f"Stock insuficiente para {product.name} (disponível: {product.stock})")

        lines.append((product, quantity))
        total += product.price * quantity

    total = round(total, 2)

    try:
        amount_paid = float(amount_paid)
    except (TypeError, ValueError):
        raise ValueError("Valor pago inválido")

    if not math.isfinite(amount_paid):
        raise ValueError("Valor pago inválido")

    if amount_paid < total:
        raise ValueError("O valor pago é inferior ao total")

    sale = Sale(
        user_id=user.id,
        date=date or datetime.now(),
        customer=customer or {},
        total=total,
        amount_paid=amount_paid,
        change=calculate_change(total, amount_paid),
        payment_method=payment_method or "Dinheiro",
        notes=notes,
    )

    try:
        for product, quantity in lines:
            sale.items.append(SaleItem(
                product_id=product.id,
                name=product.name,
                category=product.category,
                unit_price=product.price,
                quantity=quantity,
            ))
            product.stock -= quantity

        db.session.add(sale)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info("🧾 Venda %s registada: %s itens, total %.2f", sale.id, len(lines), total)
    return sale
