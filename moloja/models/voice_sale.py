"""
Modelo: Venda rápida por voz (Experta Go)
"""
from datetime import datetime
from ..db import db


class VoiceSale(db.Model):
    __tablename__ = "voice_sales"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=False, index=True)

    original_voice_input = db.Column(db.Text, nullable=False)
    processed_text = db.Column(db.Text, nullable=True)
    product_name = db.Column(db.String(160), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    unit_price = db.Column(db.Float, nullable=False, default=0)
    total_amount = db.Column(db.Float, nullable=False, default=0)

    is_generic_product = db.Column(db.Boolean, default=False)
    correction_pending = db.Column(db.Boolean, default=True)

    sale_date = db.Column(db.DateTime, default=datetime.now, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "original_voice_input": self.original_voice_input,
            "processed_text": self.processed_text,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "total_amount": self.total_amount,
            "is_generic_product": self.is_generic_product,
            "correction_pending": self.correction_pending,
            "sale_date": self.sale_date.isoformat() if self.sale_date else None,
        }
