"""
Modelo: Utilizador / Perfil
Conta de acesso + dados da empresa usados nos recibos
"""
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from ..db import db

ROLES = ("admin", "vendedor", "gerente")
MODULES = ("supermarket", "butcher")


class User(db.Model):
    __tablename__ = "profiles"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    name = db.Column(db.String(120), nullable=True)
    phone = db.Column(db.String(40), nullable=True)
    address = db.Column(db.Text, nullable=True)
    position = db.Column(db.String(80), nullable=True)
    avatar_url = db.Column(db.Text, nullable=True)

    role = db.Column(db.String(20), nullable=False, default="vendedor")
    # admin | vendedor | gerente

    # Módulo do negócio escolhido
    module = db.Column(db.String(20), nullable=True)
    # supermarket | butcher

    # Primeiro acesso: obriga a trocar a senha
    needs_password_change = db.Column(db.Boolean, default=False)

    # Dados fiscais e de faturação
    tax_id = db.Column(db.String(40), nullable=True)  # NIF
    currency = db.Column(db.String(8), nullable=True, default="AOA")
    tax_rate = db.Column(db.Float, nullable=True)
    profit_rate = db.Column(db.Float, nullable=True)

    # Personalização do recibo
    receipt_title = db.Column(db.String(120), nullable=True)
    receipt_message = db.Column(db.Text, nullable=True)
    receipt_footer_text = db.Column(db.Text, nullable=True)
    receipt_additional_info = db.Column(db.Text, nullable=True)
    receipt_logo = db.Column(db.Text, nullable=True)
    receipt_show_logo = db.Column(db.Boolean, default=False)
    receipt_show_signature = db.Column(db.Boolean, default=False)

    company_neighborhood = db.Column(db.String(120), nullable=True)
    company_city = db.Column(db.String(120), nullable=True)
    company_social_media = db.Column(db.String(120), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "phone": self.phone,
            "address": self.address,
            "position": self.position,
            "avatar_url": self.avatar_url,
            "role": self.role,
            "module": self.module,
            "needs_password_change": self.needs_password_change,
            "tax_id": self.tax_id,
            "currency": self.currency,
            "tax_rate": self.tax_rate,
            "profit_rate": self.profit_rate,
            "receipt_title": self.receipt_title,
            "receipt_message": self.receipt_message,
            "receipt_footer_text": self.receipt_footer_text,
            "receipt_additional_info": self.receipt_additional_info,
            "receipt_logo": self.receipt_logo,
            "receipt_show_logo": self.receipt_show_logo,
            "receipt_show_signature": self.receipt_show_signature,
            "company_neighborhood": self.company_neighborhood,
            "company_city": self.company_city,
            "company_social_media": self.company_social_media,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
