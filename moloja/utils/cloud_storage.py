"""
Utilidade: Armazenamento de imagens de produtos
Google Cloud Storage quando GCS_BUCKET_NAME está definido, senão pasta local uploads/
"""
import json
import logging
import os
import uuid

from flask import current_app
from google.cloud import storage
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

IMAGES_PREFIX = "/api/images/"


def _bucket_name():
    return current_app.config.get("GCS_BUCKET_NAME")


def _upload_folder():
    return current_app.config.get("UPLOAD_FOLDER") or os.path.join(os.getcwd(), "uploads")


def get_storage_client():
    """Cliente do Cloud Storage a partir de JSON (string) ou ficheiro de credenciais"""
    creds = current_app.config.get("GOOGLE_APPLICATION_CREDENTIALS") or os.getenv("GOOGLE_APPLICATION_CREDENTIALS")

    if not creds:
        logger.warning("⚠️ GOOGLE_APPLICATION_CREDENTIALS não está configurado")
        return None

    creds = creds.strip()

    try:
        # Em cloud as credenciais chegam como JSON numa variável de ambiente
        if creds.startswith("{"):
            return storage.Client.from_service_account_info(json.loads(creds))
        if os.path.exists(creds):
            return storage.Client.from_service_account_json(creds)
    except json.JSONDecodeError as e:
        logger.error("GOOGLE_APPLICATION_CREDENTIALS não é um JSON válido: %s", e)
        return None
    except Exception:
        logger.exception("Erro ao inicializar o Cloud Storage")
        return None

    logger.warning("⚠️ GOOGLE_APPLICATION_CREDENTIALS não é JSON nem ficheiro existente")
    return None


def _blob_path(path):
    """Aceita gs://bucket/x, https://storage.googleapis.com/bucket/x, /api/images/x ou x"""
    bucket_name = _bucket_name() or ""
    if path.startswith(IMAGES_PREFIX):
        return path[len(IMAGES_PREFIX):]
    if path.startswith("gs://"):
        if f"{bucket_name}/" in path:
            return path.split(f"{bucket_name}/", 1)[1]
        return path.split("/", 3)[3]
    if "storage.googleapis.com" in path and f"{bucket_name}/" in path:
        return path.split(f"{bucket_name}/", 1)[1]
    return path.lstrip("/")


def _safe_local_path(relative):
    base = os.path.abspath(_upload_folder())
    full = os.path.abspath(os.path.join(base, relative))
    if not full.startswith(base + os.sep):
        return None
    return full


def upload_file(file, folder="products"):
    """
    Guarda um ficheiro enviado (FileStorage).

    Returns:
        str: URL relativa /api/images/<path> ou None se falhar
    """
    filename = secure_filename(file.filename or "")
    if not filename:
        return None
    relative = f"{folder}/{uuid.uuid4()}_{filename}"

    if _bucket_name():
        client = get_storage_client()
        if not client:
            return None
        try:
            blob = client.bucket(_bucket_name()).blob(relative)
            blob.upload_from_file(file, content_type=file.content_type)
        except Exception:
            logger.exception("❌ Erro ao enviar ficheiro para o Cloud Storage")
            return None
    else:
        target = _safe_local_path(relative)
        os.makedirs(os.path.dirname(target), exist_ok=True)
        file.save(target)

    logger.info("✅ Ficheiro guardado: %s", relative)
    return f"{IMAGES_PREFIX}{relative}"


def get_file_content(path):
    """
    Conteúdo de um ficheiro guardado.

    Returns:
        tuple: (content, content_type) ou (None, None)
    """
    relative = _blob_path(path)

    if not _bucket_name():
        full = _safe_local_path(relative)
        if not full or not os.path.isfile(full):
            return None, None
        with open(full, "rb") as fh:
            content = fh.read()
        ext = full.rsplit(".", 1)[-1].lower()
        content_type = "image/jpeg" if ext in ("jpg", "jpeg") else f"image/{ext}"
        return content, content_type

    client = get_storage_client()
    if not client:
        return None, None

    try:
        blob = client.bucket(_bucket_name()).blob(relative)
        if not blob.exists():
            return None, None
        return blob.download_as_bytes(), blob.content_type or "application/octet-stream"
    except Exception:
        logger.exception("❌ Erro ao obter ficheiro %s", relative)
        return None, None


def delete_file(file_url):
    """Apaga o ficheiro; True se foi apagado"""
    if not file_url:
        return False
    relative = _blob_path(file_url)

    if not _bucket_name():
        full = _safe_local_path(relative)
        if full and os.path.isfile(full):
            os.remove(full)
            return True
        return False

    client = get_storage_client()
    if not client:
        return False

    try:
        client.bucket(_bucket_name()).blob(relative).delete()
        return True
    except Exception:
        logger.exception("❌ Erro ao apagar ficheiro %s", relative)
        return False
