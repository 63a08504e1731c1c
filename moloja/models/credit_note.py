"""
Modelo: Nota de crédito
Devolução total ou parcial de uma venda
"""
from datetime import datetime
from ..db import db

STATUSES = ("pending", "approved", "rejected")


class CreditNote(db.Model):
    __tablename__ = "credit_notes"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=False, index=True)
    original_sale_id = db.Column(db.Integer, db.ForeignKey("sales.id"), nullable=False, index=True)

    date = db.Column(db.DateTime, default=datetime.utcnow)
    reason = db.Column(db.String(255), nullable=False)
    observations = db.Column(db.Text, nullable=True)

    # Cópia dos dados do cliente e dos itens devolvidos
    customer = db.Column(db.JSON, nullable=True)
    items = db.Column(db.JSON, nullable=False, default=list)
    total = db.Column(db.Float, nullable=False)

    status = db.Column(db.String(20), nullable=False, default="pending")
    # pending | approved | rejected

    original_sale = db.relationship("Sale", backref="credit_notes")

    def to_dict(self):
        return {
            "id": self.id,
            "original_sale_id": self.original_sale_id,
            "date": self.date.isoformat() if self.date else None,
            "reason": self.reason,
            "observations": self.observations,
            "customer": self.customer or {},
            "items": self.items or [],
            "total": self.total,
            "status": self.status,
        }
