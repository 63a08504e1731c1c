"""
Modelo: Correção pendente de um registo por voz
O utilizador revê no fim do dia o texto interpretado
"""
from datetime import datetime, date
from ..db import db


class VoiceCorrection(db.Model):
    __tablename__ = "voice_corrections"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=False, index=True)

    item_type = db.Column(db.String(20), nullable=False)
    # sale | expense
    item_id = db.Column(db.Integer, nullable=False)

    original_text = db.Column(db.Text, nullable=False)
    corrected_text = db.Column(db.Text, nullable=True)
    correction_date = db.Column(db.Date, default=date.today)

    status = db.Column(db.String(20), nullable=False, default="pending")
    # pending | applied

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "item_type": self.item_type,
            "item_id": self.item_id,
            "original_text": self.original_text,
            "corrected_text": self.corrected_text,
            "correction_date": self.correction_date.isoformat() if self.correction_date else None,
            "status": self.status,
        }
