"""
Modelo: Venda
Cabeçalho da venda; os itens ficam em SaleItem
"""
from datetime import datetime
from ..db import db


class Sale(db.Model):
    __tablename__ = "sales"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=False, index=True)

    date = db.Column(db.DateTime, default=datetime.now, index=True)

    # Dados do cliente: name, phone, email, address, nif
    customer = db.Column(db.JSON, nullable=True)

    total = db.Column(db.Float, nullable=False)
    amount_paid = db.Column(db.Float, nullable=False)
    change = db.Column(db.Float, nullable=False, default=0)
    payment_method = db.Column(db.String(30), nullable=True, default="Dinheiro")
    notes = db.Column(db.Text, nullable=True)

    items = db.relationship(
        "SaleItem", backref="sale", cascade="all, delete-orphan", order_by="SaleItem.id"
    )

    @property
    def customer_name(self):
        if self.customer and self.customer.get("name"):
            return self.customer["name"]
        return "Cliente não identificado"

    def to_dict(self, include_items=True):
        data = {
            "id": self.id,
            "date": self.date.isoformat() if self.date else None,
            "customer": self.customer or {},
            "customer_name": self.customer_name,
            "total": self.total,
            "amount_paid": self.amount_paid,
            "change": self.change,
            "payment_method": self.payment_method,
            "notes": self.notes,
            "items_count": sum(item.quantity for item in self.items),
        }
        if include_items:
            data["items"] = [item.to_dict() for item in self.items]
        return data
