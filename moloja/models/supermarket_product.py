"""
Modelo: Produto de supermercado
"""
from datetime import datetime
from ..db import db

CATEGORY_TYPES = {
    "groceries": "Mercearia",
    "dairy": "Lacticínios",
    "meat": "Carnes",
    "produce": "Frutas e Legumes",
    "bakery": "Padaria",
    "beverages": "Bebidas",
    "household": "Produtos Domésticos",
    "personal": "Higiene Pessoal",
    "frozen": "Congelados",
    "snacks": "Petiscos e Snacks",
}


class SupermarketProduct(db.Model):
    __tablename__ = "supermarket_products"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=False, index=True)

    name = db.Column(db.String(160), nullable=False)
    category_type = db.Column(db.String(20), nullable=False)
    price = db.Column(db.Float, nullable=False)
    cost = db.Column(db.Float, nullable=False, default=0)
    stock = db.Column(db.Integer, nullable=False, default=0)
    description = db.Column(db.Text, nullable=True)
    barcode = db.Column(db.String(64), nullable=True, index=True)
    expiry_date = db.Column(db.Date, nullable=True)
    brand = db.Column(db.String(80), nullable=True)
    unit = db.Column(db.String(20), nullable=True, default="unidade")
    discount_percentage = db.Column(db.Float, nullable=True)
    featured = db.Column(db.Boolean, default=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def final_price(self):
        if self.discount_percentage:
            return round(self.price * (1 - self.discount_percentage / 100), 2)
        return self.price

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "category_type": self.category_type,
            "category_label": CATEGORY_TYPES.get(self.category_type, self.category_type),
            "price": self.price,
            "final_price": self.final_price,
            "cost": self.cost,
            "stock": self.stock,
            "description": self.description,
            "barcode": self.barcode,
            "expiry_date": self.expiry_date.isoformat() if self.expiry_date else None,
            "brand": self.brand,
            "unit": self.unit,
            "discount_percentage": self.discount_percentage,
            "featured": self.featured,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
