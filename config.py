# config.py
import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "super-secret-key"
    _BASE_DIR = os.path.abspath(os.path.dirname(__file__))
    _DEFAULT_DB_PATH = os.path.join(_BASE_DIR, "instance", "registro_escolar.db")
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL") or f"sqlite:///{_DEFAULT_DB_PATH}"
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Tokens de acceso (Bearer) emitidos en /login
    JWT_SECRET = os.environ.get("JWT_SECRET") or SECRET_KEY
    JWT_ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")
    JWT_EXP_MINUTES = int(os.environ.get("JWT_EXP_MINUTES", "60"))

    # Proveedor de IA para los insights: gemini | openai | heuristic
    AI_PROVIDER = os.environ.get("AI_PROVIDER", "gemini")
    AI_MODEL = os.environ.get("AI_MODEL")
    AI_TIMEOUT = float(os.environ.get("AI_TIMEOUT", "30"))
    GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY")
    OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY") or os.environ.get("AI_API_KEY")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET = "test-secret"
    AI_PROVIDER = "heuristic"
    GEMINI_API_KEY = None
    OPENAI_API_KEY = None
