"""
Modelo: Produto do Experta Go
Criado automaticamente a partir das vendas por voz
"""
from datetime import datetime
from ..db import db


class VoiceProduct(db.Model):
    __tablename__ = "voice_products"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=False, index=True)

    name = db.Column(db.String(160), nullable=False)
    current_stock = db.Column(db.Integer, nullable=False, default=0)
    total_sold = db.Column(db.Integer, nullable=False, default=0)
    last_unit_price = db.Column(db.Float, nullable=True)
    is_generic = db.Column(db.Boolean, default=False)

    # Frases originais que geraram movimentos deste produto
    original_voice_inputs = db.Column(db.JSON, nullable=False, default=list)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "current_stock": self.current_stock,
            "total_sold": self.total_sold,
            "last_unit_price": self.last_unit_price,
            "is_generic": self.is_generic,
            "original_voice_inputs": self.original_voice_inputs or [],
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
