"""
API: Experta Go
Transcrição, registo de vendas/despesas por voz, comandos, correções e fila offline
"""
import logging
import traceback
from datetime import date, datetime, timedelta

from flask import Blueprint, current_app, g, jsonify, request

from ..models import Product, SpeechCorrection, VoiceCorrection, VoiceExpense, VoiceProduct, VoiceSale
from ..services.analytics import daily_profit
from ..services.offline_queue import OfflineStore, sync_offline_records
from ..services.product_match import find_best_product_match, find_similar_products
from ..services.speech_corrections import (
    apply_voice_corrections,
    find_possible_corrections,
    save_voice_correction,
)
from ..services.transcription import TranscriptionUnavailable, transcribe_audio
from ..services.voice_entries import apply_correction, process_voice_input
from ..services.voice_parser import parse_voice_order, process_voice_command
from ..utils.auth import login_required

logger = logging.getLogger(__name__)

bp = Blueprint("voice", __name__)


def _offline_store():
    return OfflineStore(current_app.config["OFFLINE_STORE_PATH"])


def _text():
    return ((request.json or {}).get("text") or "").strip()


def _day_range(value):
    """Início e fim do dia indicado (AAAA-MM-DD) ou de hoje"""
    day = date.fromisoformat(value) if value else date.today()
    start = datetime.combine(day, datetime.min.time())
    return start, start + timedelta(days=1)


@bp.route("/transcribe", methods=["POST"])
@login_required
def transcribe():
    """Transcreve o áudio (campo 'audio') e aplica as correções de fala"""
    try:
        text = transcribe_audio(request.files.get("audio"), request.form.get("language"))
    except TranscriptionUnavailable as e:
        return jsonify({"error": str(e)}), 503
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error("Erro na transcrição: %s\n%s", e, traceback.format_exc())
        return jsonify({"error": f"Erro ao transcrever áudio: {str(e)}"}), 500

    user_id = g.current_user.id
    return jsonify({
        "text": text,
        "corrected_text": apply_voice_corrections(text, user_id),
        "possible_corrections": find_possible_corrections(text, user_id),
    })


@bp.route("/process", methods=["POST"])
@login_required
def process():
    """
    Regista uma venda ou despesa ditada.

    Body: {"text": "...", "type": "sale" | "expense"}
    """
    data = request.json or {}
    text = apply_voice_corrections((data.get("text") or "").strip(), g.current_user.id)

    try:
        result = process_voice_input(text, data.get("type", "sale"), g.current_user)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error("Erro ao registar entrada de voz: %s\n%s", e, traceback.format_exc())
        return jsonify({"error": f"Erro ao registar: {str(e)}"}), 500

    return jsonify({"message": result["message"], "data": result["data"].to_dict()}), 201


@bp.route("/parse-order", methods=["POST"])
@login_required
def parse_order():
    """Interpreta um pedido ditado e procura o produto no catálogo"""
    text = _text()
    if not text:
        return jsonify({"error": "Texto vazio."}), 400

    text = apply_voice_corrections(text, g.current_user.id)
    products = Product.query.filter_by(user_id=g.current_user.id).all()
    order = parse_voice_order(text)
    match = find_best_product_match(order, products)

    return jsonify({
        "order": order,
        "match": {"product": match["product"].to_dict(), "confidence": match["confidence"]} if match else None,
        "similar": [
            {"product": s["product"].to_dict(), "similarity": s["similarity"]}
            for s in find_similar_products(order["name"], products)[:5]
        ],
    })


@bp.route("/command", methods=["POST"])
@login_required
def command():
    """Reconhece o comando (adicionar produto, venda, despesa, stock)"""
    text = _text()
    if not text:
        return jsonify({"error": "Texto vazio."}), 400

    text = apply_voice_corrections(text, g.current_user.id)
    products = Product.query.filter_by(user_id=g.current_user.id).all()
    result = process_voice_command(text, products)

    match = result["data"].get("match")
    if match:
        result["data"]["match"] = {"product": match["product"].to_dict(), "confidence": match["confidence"]}
    return jsonify(result)


@bp.route("/sales", methods=["GET"])
@login_required
def get_voice_sales():
    """Vendas por voz de um dia (date=AAAA-MM-DD, por omissão hoje)"""
    try:
        start, end = _day_range(request.args.get("date"))
    except ValueError:
        return jsonify({"error": "Data inválida"}), 400

    sales = (
        VoiceSale.query
        .filter(VoiceSale.user_id == g.current_user.id, VoiceSale.sale_date >= start, VoiceSale.sale_date < end)
        .order_by(VoiceSale.sale_date.desc())
        .all()
    )
    return jsonify({
        "sales": [s.to_dict() for s in sales],
        "total": round(sum(s.total_amount for s in sales), 2),
    })


@bp.route("/expenses", methods=["GET"])
@login_required
def get_voice_expenses():
    try:
        start, end = _day_range(request.args.get("date"))
    except ValueError:
        return jsonify({"error": "Data inválida"}), 400

    expenses = (
        VoiceExpense.query
        .filter(
            VoiceExpense.user_id == g.current_user.id,
            VoiceExpense.expense_date >= start,
            VoiceExpense.expense_date < end,
        )
        .order_by(VoiceExpense.expense_date.desc())
        .all()
    )
    return jsonify({
        "expenses": [e.to_dict() for e in expenses],
        "total": round(sum(e.amount for e in expenses), 2),
    })


@bp.route("/products", methods=["GET"])
@login_required
def get_voice_products():
    products = VoiceProduct.query.filter_by(user_id=g.current_user.id).order_by(VoiceProduct.name).all()
    return jsonify([p.to_dict() for p in products])


@bp.route("/corrections", methods=["GET"])
@login_required
def get_corrections():
    """Correções pendentes para revisão"""
    corrections = (
        VoiceCorrection.query
        .filter_by(user_id=g.current_user.id, status="pending")
        .order_by(VoiceCorrection.created_at.desc())
        .all()
    )
    return jsonify([c.to_dict() for c in corrections])


@bp.route("/corrections/<int:id>/apply", methods=["POST"])
@login_required
def apply_voice_correction(id):
    correction = VoiceCorrection.query.filter_by(id=id, user_id=g.current_user.id).first_or_404()
    if correction.status != "pending":
        return jsonify({"error": "A correção já foi aplicada"}), 409

    try:
        correction = apply_correction(correction, (request.json or {}).get("corrected_text"))
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    return jsonify(correction.to_dict())


@bp.route("/speech-corrections", methods=["GET"])
@login_required
def get_speech_corrections():
    corrections = SpeechCorrection.query.filter_by(user_id=g.current_user.id).all()
    return jsonify([c.to_dict() for c in corrections])


@bp.route("/speech-corrections", methods=["POST"])
@login_required
def create_speech_correction():
    """Ensina uma correção: {"original_text", "corrected_text"}"""
    data = request.json or {}
    try:
        correction = save_voice_correction(g.current_user.id, data.get("original_text"), data.get("corrected_text"))
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(correction.to_dict()), 201


@bp.route("/speech-corrections/apply", methods=["POST"])
@login_required
def apply_speech_corrections():
    text = _text()
    return jsonify({
        "text": text,
        "corrected_text": apply_voice_corrections(text, g.current_user.id),
        "possible_corrections": find_possible_corrections(text, g.current_user.id),
    })


@bp.route("/daily-profit", methods=["GET"])
@login_required
def get_daily_profit():
    return jsonify(daily_profit(g.current_user, default_rate=current_app.config["DEFAULT_PROFIT_RATE"]))


# ============ Fila offline ============

@bp.route("/offline", methods=["POST"])
@login_required
def save_offline_record():
    """Guarda uma transação na fila local: {"type", "description", "amount"}"""
    data = dict(request.json or {})
    data["user_id"] = g.current_user.id
    try:
        record = _offline_store().save_record(data)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(record), 201


@bp.route("/offline", methods=["GET"])
@login_required
def get_offline_records():
    """Todas as transações locais; ?pending=true só as por sincronizar"""
    store = _offline_store()
    if request.args.get("pending") == "true":
        records = store.get_unsynced_records(user_id=g.current_user.id)
    else:
        records = store.get_all_records(user_id=g.current_user.id)
    return jsonify(records)


@bp.route("/offline/stats", methods=["GET"])
@login_required
def get_offline_stats():
    return jsonify(_offline_store().get_todays_stats(user_id=g.current_user.id))


@bp.route("/offline/sync", methods=["POST"])
@login_required
def sync_offline():
    result = sync_offline_records(_offline_store(), g.current_user)
    return jsonify(result)


@bp.route("/offline/synced", methods=["DELETE"])
@login_required
def clear_synced():
    deleted = _offline_store().clear_synced_records(user_id=g.current_user.id)
    return jsonify({"deleted": deleted})
