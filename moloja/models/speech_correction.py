"""
Modelo: Correção de reconhecimento de fala
Substituições aprendidas por utilizador (ex: "que bom" -> "tibone")
"""
from datetime import datetime
from ..db import db


class SpeechCorrection(db.Model):
    __tablename__ = "speech_corrections"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=False, index=True)
    original_text = db.Column(db.String(255), nullable=False)
    corrected_text = db.Column(db.String(255), nullable=False)
    active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "original_text": self.original_text,
            "corrected_text": self.corrected_text,
            "active": self.active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
