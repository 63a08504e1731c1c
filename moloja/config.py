"""
Configuração da aplicação
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Diretório base do projeto
BASE_DIR = Path(__file__).resolve().parent.parent

# Carregar .env a partir do diretório do projeto
load_dotenv(BASE_DIR / '.env')


class Config:
    """Configuração base"""

    # Flask
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
    FLASK_ENV = os.getenv("FLASK_ENV", "development")
    TESTING = False

    # Base de dados com path absoluto
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL") or f"sqlite:///{BASE_DIR}/instance/moloja.db"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False

    # Autenticação
    JWT_EXPIRATION_DAYS = int(os.getenv("JWT_EXPIRATION_DAYS", "7"))

    # Utilizador de demonstração (só em desenvolvimento)
    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@moloja.ao")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "moloja123")

    # OpenAI (transcrição de voz)
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
    TRANSCRIPTION_MODEL = os.getenv("TRANSCRIPTION_MODEL", "whisper-1")
    TRANSCRIPTION_LANGUAGE = os.getenv("TRANSCRIPTION_LANGUAGE", "pt")

    # Google Cloud Storage (imagens de produtos)
    GCS_BUCKET_NAME = os.getenv("GCS_BUCKET_NAME")
    GOOGLE_APPLICATION_CREDENTIALS = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
    # Sem bucket as imagens ficam em disco
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER") or str(BASE_DIR / "uploads")

    # Fila offline do Experta Go
    OFFLINE_STORE_PATH = os.getenv("OFFLINE_STORE_PATH") or str(BASE_DIR / "instance" / "experta-offline.db")

    # Regras de negócio
    LOW_STOCK_THRESHOLD = int(os.getenv("LOW_STOCK_THRESHOLD", "10"))
    DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "AOA")
    DEFAULT_PROFIT_RATE = float(os.getenv("DEFAULT_PROFIT_RATE", "5"))

    # CORS
    ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*")

    # Logs
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Limites de upload
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB
    ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}
    ALLOWED_AUDIO_EXTENSIONS = {'webm', 'wav', 'mp3', 'm4a', 'ogg', 'mp4'}


class DevelopmentConfig(Config):
    """Configuração de desenvolvimento"""
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class ProductionConfig(Config):
    """Configuração de produção"""
    DEBUG = False
    SQLALCHEMY_ECHO = False


class TestingConfig(Config):
    """Configuração dos testes"""
    TESTING = True
    FLASK_ENV = "testing"
    SECRET_KEY = "test-secret-key"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    OPENAI_API_KEY = None
    GCS_BUCKET_NAME = None
    LOG_LEVEL = "WARNING"


# Mapeamento de configurações
config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def get_config(name=None):
    """Obtém a configuração segundo o ambiente"""
    env = name or os.getenv("FLASK_ENV", "development")
    return config_by_name.get(env, DevelopmentConfig)
