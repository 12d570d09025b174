import os
import threading
from dotenv import load_dotenv

load_dotenv()

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173"


def _database_url() -> str:
    url = os.environ.get("DATABASE_URL")
    if url:
        return url

    postgres_url = os.environ.get("POSTGRES_URL")
    if postgres_url:
        user = os.environ.get("POSTGRES_USER")
        password = os.environ.get("POSTGRES_PASSWORD")
        db = os.environ.get("POSTGRES_DB")
        return f"postgresql://{user}:{password}@{postgres_url}/{db}"

    return "sqlite:///./tracker.db"


class BackendSettings:
    _instance = None
    _lock = threading.Lock()

    def __init__(self):
        self.DEBUG_MODE = os.environ.get("DEBUG_MODE","development")
        self.LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
        self.DATABASE_URL = _database_url()
        # Server
        self.SERVER_HOST = os.environ.get("SERVER_HOST", "0.0.0.0")
        self.SERVER_PORT = int(os.environ.get("SERVER_PORT", "8000"))
        self.CORS_ORIGINS = [
            origin.strip()
            for origin in os.environ.get("CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(",")
            if origin.strip()
        ]
        # Authentication settings
        self.JWT_SECRET = os.environ.get("JWT_SECRET", "development-secret")
        self.JWT_ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")
        self.JWT_EXPIRATION_HOURS = int(os.environ.get("JWT_EXPIRATION_HOURS", "24"))
        # Push channel
        self.NOTIFICATION_QUEUE_SIZE = int(os.environ.get("NOTIFICATION_QUEUE_SIZE", "100"))

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(BackendSettings, cls).__new__(cls)
        return cls._instance

settings = BackendSettings()
