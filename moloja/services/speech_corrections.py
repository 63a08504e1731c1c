"""
Serviço: Correções de reconhecimento de fala
Correções conhecidas (nomes de produtos mal transcritos) + correções do utilizador
"""
import logging
import re
from typing import List

from ..db import db
from ..models import SpeechCorrection

logger = logging.getLogger(__name__)

KNOWN_CORRECTIONS = {
    "tibone": ["tibana", "que bom né", "que bom", "te bom", "que bone", "ti bone", "tee bone", "te bone", "ti bom", "riboni"],
    "yummy bolacha": ["filme bolacha", "iume bolacha", "iuni bolacha", "iami bolacha"],
    "yummy": ["iami", "iume", "iuni", "filme", "iome", "iumê", "iumi"],
    "mocoto": ["mucoto", "macoto", "mo coto", "mu coto"],
}


def _user_corrections(user_id) -> List[SpeechCorrection]:
    return SpeechCorrection.query.filter_by(user_id=user_id, active=True).all()


def apply_known_corrections(text: str) -> str:
    """Substitui a primeira variação conhecida encontrada"""
    lowered = text.lower()
    for correct, variations in KNOWN_CORRECTIONS.items():
        for variation in variations:
            if variation in lowered:
                return re.sub(re.escape(variation), correct, text, count=1, flags=re.IGNORECASE)
    return text


def apply_voice_corrections(text: str, user_id=None) -> str:
    """Correções conhecidas primeiro; se nada mudou aplica as do utilizador"""
    if not text:
        return text

    corrected = apply_known_corrections(text)
    if corrected != text:
        logger.debug("Correção conhecida: %r -> %r", text, corrected)
        return corrected

    if user_id is None:
        return text

    for correction in _user_corrections(user_id):
        corrected = re.sub(re.escape(correction.original_text), correction.corrected_text, corrected, flags=re.IGNORECASE)
    return corrected


def find_possible_corrections(text: str, user_id=None) -> List[str]:
    """Termos corrigidos possíveis para o texto, sem duplicados"""
    if not text:
        return []

    lowered = text.lower()
    found = []
    for correct, variations in KNOWN_CORRECTIONS.items():
        if any(v in lowered for v in variations):
            found.append(correct)

    if user_id is not None:
        for correction in _user_corrections(user_id):
            if correction.original_text.lower() in lowered:
                found.append(correction.corrected_text)

    return list(dict.fromkeys(found))


def save_voice_correction(user_id, original_text: str, corrected_text: str) -> SpeechCorrection:
    """Guarda (ou actualiza) a correção para este texto original"""
    original_text = (original_text or "").strip().lower()
    corrected_text = (corrected_text or "").strip()
    if not original_text or not corrected_text:
        raise ValueError("Texto original e corrigido são obrigatórios")

    correction = SpeechCorrection.query.filter_by(user_id=user_id, original_text=original_text).first()
    if correction:
        correction.corrected_text = corrected_text
        correction.active = True
    else:
        correction = SpeechCorrection(user_id=user_id, original_text=original_text, corrected_text=corrected_text)
        db.session.add(correction)

    db.session.commit()
    return correction
