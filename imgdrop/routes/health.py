from fastapi import APIRouter

from imgdrop.config import TOTP_SECRET_FILE, UPLOAD_DIR

router = APIRouter(tags=["health"])


def _check_secret_record() -> str:
    # the verifier keeps working from memory, but a restart would mint a new secret
    if not TOTP_SECRET_FILE.is_file():
        return f"error: {TOTP_SECRET_FILE.name} is missing"
    return "ok"


def _check_upload_dir() -> str:
    marker = UPLOAD_DIR / ".health_check"
    try:
        UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
        marker.write_bytes(b"")
        marker.unlink()
    except OSError as e:
        return f"error: {e}"
    return "ok"


@router.get("/health")
def health():
    checks = {"secret": _check_secret_record(), "storage": _check_upload_dir()}
    status = "ok" if all(v == "ok" for v in checks.values()) else "unhealthy"
    return {"status": status, "checks": checks}
