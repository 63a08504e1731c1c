"""
API: Imagens
Serve as imagens dos produtos (Cloud Storage ou pasta local)
"""
import logging

from flask import Blueprint, Response

from ..utils.cloud_storage import get_file_content

logger = logging.getLogger(__name__)

bp = Blueprint("images", __name__)


@bp.route("/<path:image_path>", methods=["GET"])
def serve_image(image_path):
    """
    Serve uma imagem guardada.

    Args:
        image_path: caminho relativo (ex: products/17/foto.png)
    """
    try:
        content, content_type = get_file_content(image_path)

        if content is None:
            return Response("Imagem não encontrada", status=404, mimetype="text/plain")

        response = Response(content, mimetype=content_type)
        response.headers["Cache-Control"] = "public, max-age=31536000"  # 1 ano
        return response

    except Exception as e:
        logger.exception("❌ Erro ao servir imagem %s", image_path)
        return Response(f"Erro: {str(e)}", status=500, mimetype="text/plain")
