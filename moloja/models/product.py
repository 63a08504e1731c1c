"""
Modelo: Produto
Catálogo genérico usado no POS (checkout, inventário, relatórios)
"""
from datetime import datetime
from ..db import db


class Product(db.Model):
    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=False, index=True)

    name = db.Column(db.String(160), nullable=False)
    code = db.Column(db.String(64), nullable=True, index=True)
    category = db.Column(db.String(80), nullable=False, default="Outros")
    description = db.Column(db.Text, nullable=True)
    image = db.Column(db.Text, nullable=True)

    # Preço de venda e de compra
    price = db.Column(db.Float, nullable=False, default=0)
    purchase_price = db.Column(db.Float, nullable=False, default=0)
    profit_margin = db.Column(db.Float, nullable=True)

    stock = db.Column(db.Integer, nullable=False, default=0)
    is_public = db.Column(db.Boolean, default=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "code": self.code,
            "category": self.category,
            "description": self.description,
            "image": self.image,
            "price": self.price,
            "purchase_price": self.purchase_price,
            "profit_margin": self.profit_margin,
            "stock": self.stock,
            "is_public": self.is_public,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
