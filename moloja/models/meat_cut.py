"""
Modelo: Corte de carne (módulo talho)
Vendido ao quilo; stock em peso
"""
from datetime import datetime
from ..db import db

ANIMAL_TYPES = {
    "beef": "Bovino",
    "pork": "Suíno",
    "lamb": "Cordeiro/Carneiro",
    "chicken": "Frango",
    "goat": "Caprino",
    "game": "Caça",
}


class MeatCut(db.Model):
    __tablename__ = "meat_cuts"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=False, index=True)

    name = db.Column(db.String(120), nullable=False)
    animal_type = db.Column(db.String(20), nullable=False)
    price_per_kg = db.Column(db.Float, nullable=False)
    cost_per_kg = db.Column(db.Float, nullable=False, default=0)
    stock_weight = db.Column(db.Float, nullable=False, default=0)
    description = db.Column(db.Text, nullable=True)
    barcode = db.Column(db.String(64), nullable=True, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "animal_type": self.animal_type,
            "animal_label": ANIMAL_TYPES.get(self.animal_type, self.animal_type),
            "price_per_kg": self.price_per_kg,
            "cost_per_kg": self.cost_per_kg,
            "stock_weight": self.stock_weight,
            "description": self.description,
            "barcode": self.barcode,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
