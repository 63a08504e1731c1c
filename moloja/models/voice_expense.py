"""
Modelo: Despesa rápida por voz (Experta Go)
"""
from datetime import datetime
from ..db import db


class VoiceExpense(db.Model):
    __tablename__ = "voice_expenses"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=False, index=True)

    original_voice_input = db.Column(db.Text, nullable=False)
    processed_text = db.Column(db.Text, nullable=True)
    description = db.Column(db.String(255), nullable=False)
    amount = db.Column(db.Float, nullable=False, default=0)

    is_generic_description = db.Column(db.Boolean, default=False)
    correction_pending = db.Column(db.Boolean, default=True)

    expense_date = db.Column(db.DateTime, default=datetime.now, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "original_voice_input": self.original_voice_input,
            "processed_text": self.processed_text,
            "description": self.description,
            "amount": self.amount,
            "is_generic_description": self.is_generic_description,
            "correction_pending": self.correction_pending,
            "expense_date": self.expense_date.isoformat() if self.expense_date else None,
        }
