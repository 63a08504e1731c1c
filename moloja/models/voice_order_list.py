"""
Modelo: Lista de pedidos por voz
"""
from datetime import datetime
from ..db import db


class VoiceOrderList(db.Model):
    __tablename__ = "voice_order_lists"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False, default="pending")
    # pending | completed
    products = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "status": self.status,
            "products": self.products or [],
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
