"""
Serviço: Transcrição de áudio (OpenAI Whisper)
"""
import logging

from flask import current_app
from openai import OpenAI
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)


class TranscriptionUnavailable(Exception):
    """Sem OPENAI_API_KEY configurada"""


def allowed_audio(filename):
    extensions = current_app.config.get("ALLOWED_AUDIO_EXTENSIONS", set())
    return "." in filename and filename.rsplit(".", 1)[1].lower() in extensions


def transcribe_audio(file, language=None):
    """
    Transcreve um ficheiro de áudio enviado (FileStorage).

    Returns:
        str: texto reconhecido

    Raises:
        TranscriptionUnavailable: sem chave da OpenAI
        ValueError: ficheiro em falta ou formato não suportado
    """
    api_key = current_app.config.get("OPENAI_API_KEY")
    if not api_key:
        raise TranscriptionUnavailable("Transcrição indisponível: configure OPENAI_API_KEY")

    if not file or not file.filename:
        raise ValueError("Ficheiro de áudio em falta")

    filename = secure_filename(file.filename)
    if not allowed_audio(filename):
        raise ValueError("Formato de áudio não suportado")

    client = OpenAI(api_key=api_key)
    response = client.audio.transcriptions.create(
        model=current_app.config.get("TRANSCRIPTION_MODEL", "whisper-1"),
        file=(filename, file.read(), file.mimetype or "application/octet-stream"),
        language=language or current_app.config.get("TRANSCRIPTION_LANGUAGE", "pt"),
    )

    text = (response.text or "").strip()
    logger.info("🎧 Áudio transcrito (%d caracteres)", len(text))
    return text
