"""
Serviço: Registo de vendas e despesas do Experta Go
Cada registo cria também uma correção pendente para revisão no fim do dia
"""
import logging
from datetime import date
from typing import Dict

from ..db import db
from ..models import VoiceCorrection, VoiceExpense, VoiceProduct, VoiceSale
from .voice_parser import parse_expense_voice_input, parse_sale_voice_input

logger = logging.getLogger(__name__)

ENTRY_KINDS = ("sale", "expense")


def _record_sale(text, user) -> Dict:
    data = parse_sale_voice_input(text)
    is_generic = data["name"].startswith("Produto")

    sale = VoiceSale(
        user_id=user.id,
        original_voice_input=text,
        processed_text=data["processed_text"],
        product_name=data["name"],
        quantity=data["quantity"],
        unit_price=data["price"],
        total_amount=round(data["price"] * data["quantity"], 2),
        is_generic_product=is_generic,
        correction_pending=True,
    )
    db.session.add(sale)

    product = VoiceProduct.query.filter_by(user_id=user.id, name=data["name"]).first()
    if product:
        product.current_stock = max(0, product.current_stock - data["quantity"])
        product.total_sold += data["quantity"]
        product.last_unit_price = data["price"]
        product.original_voice_inputs = list(product.original_voice_inputs or []) + [text]
    else:
        db.session.add(VoiceProduct(
            user_id=user.id,
            name=data["name"],
            current_stock=0,
            total_sold=data["quantity"],
            last_unit_price=data["price"],
            is_generic=is_generic,
            original_voice_inputs=[text],
        ))

    db.session.flush()
    db.session.add(VoiceCorrection(
        user_id=user.id,
        item_type="sale",
        item_id=sale.id,
        original_text=data["processed_text"],
        correction_date=date.today(),
    ))
    return {"message": data["processed_text"], "data": sale}


def _record_expense(text, user) -> Dict:
    data = parse_expense_voice_input(text)

    expense = VoiceExpense(
        user_id=user.id,
        original_voice_input=text,
        processed_text=data["processed_text"],
        description=data["description"],
        amount=data["amount"],
        is_generic_description=data["description"].startswith("Despesa"),
        correction_pending=True,
    )
    db.session.add(expense)
    db.session.flush()

    db.session.add(VoiceCorrection(
        user_id=user.id,
        item_type="expense",
        item_id=expense.id,
        original_text=data["processed_text"],
        correction_date=date.today(),
    ))
    return {"message": data["processed_text"], "data": expense}


def process_voice_input(text: str, kind: str, user) -> Dict:
    """
    Regista uma venda ou despesa a partir do texto ditado.

    Raises:
        ValueError: texto vazio ou tipo inválido
    """
    if not text or not text.strip():
        raise ValueError("Texto vazio.")
    if kind not in ENTRY_KINDS:
        raise ValueError("Tipo inválido: use 'sale' ou 'expense'")

    try:
        result = _record_sale(text.strip(), user) if kind == "sale" else _record_expense(text.strip(), user)
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Erro ao processar entrada de voz (%s)", kind)
        raise

    logger.info("🎙️ %s registada por voz: %s", "Venda" if kind == "sale" else "Despesa", result["message"])
    return result


def apply_correction(correction: VoiceCorrection, corrected_text: str) -> VoiceCorrection:
    """
    Aplica a correção ao registo original: o texto corrigido é
    reinterpretado e substitui nome/valores.
    """
    corrected_text = (corrected_text or "").strip()
    if not corrected_text:
        raise ValueError("Texto corrigido obrigatório")

    if correction.item_type == "sale":
        sale = VoiceSale.query.filter_by(id=correction.item_id, user_id=correction.user_id).first()
        if sale:
            data = parse_sale_voice_input(corrected_text)
            sale.processed_text = data["processed_text"]
            sale.product_name = data["name"]
            sale.quantity = data["quantity"]
            if data["price"]:
                sale.unit_price = data["price"]
            sale.total_amount = round(sale.unit_price * sale.quantity, 2)
            sale.is_generic_product = data["name"].startswith("Produto")
            sale.correction_pending = False
    else:
        expense = VoiceExpense.query.filter_by(id=correction.item_id, user_id=correction.user_id).first()
        if expense:
            data = parse_expense_voice_input(corrected_text)
            expense.processed_text = data["processed_text"]
            expense.description = data["description"]
            if data["amount"]:
                expense.amount = data["amount"]
            expense.is_generic_description = data["description"].startswith("Despesa")
            expense.correction_pending = False

    correction.corrected_text = corrected_text
    correction.status = "applied"
    db.session.commit()
    return correction
