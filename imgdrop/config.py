import os
from pathlib import Path


def _env_flag(name: str, default: str = "0") -> bool:
    return (os.environ.get(name, default) or "").strip().lower() in ("1", "true", "yes", "on")


TOTP_SECRET_FILE = Path(os.environ.get("TOTP_SECRET_FILE", "totp_secret.txt")).resolve()
TOTP_ISSUER = os.environ.get("TOTP_ISSUER", "FileUploadApp")
TOTP_VALID_WINDOW = int(os.environ.get("TOTP_VALID_WINDOW", "1"))
TOTP_REJECT_REPLAY = _env_flag("TOTP_REJECT_REPLAY")
UPLOAD_DIR = Path(os.environ.get("UPLOAD_DIR", "uploads")).resolve()
MAX_MB = int(os.environ.get("UPLOAD_MAX_MB", "10"))
MAX_BYTES = MAX_MB * 1024 * 1024
IMAGES_URL = os.environ.get("IMAGES_URL", "").rstrip("/")
CORS_ENABLED = _env_flag("CORS_ENABLED")
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8086"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

if TOTP_VALID_WINDOW < 0:
    raise RuntimeError("TOTP_VALID_WINDOW must not be negative")
