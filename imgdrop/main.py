from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from imgdrop.config import CORS_ENABLED, TOTP_REJECT_REPLAY, TOTP_SECRET_FILE, TOTP_VALID_WINDOW
from imgdrop.errors import UploadError
from imgdrop.models import UploadResponse
from imgdrop.routes import health, pages, upload
from imgdrop.secret_store import SecretStore
from imgdrop.security import UsedCodeCache
from imgdrop.totp import TotpVerifier

# Raises SecretStoreError and aborts startup when the record is unusable.
_secret = SecretStore(TOTP_SECRET_FILE).load_or_create()

app = FastAPI(title="imgdrop", docs_url=None, redoc_url=None, openapi_url=None)
app.state.verifier = TotpVerifier(
    _secret,
    valid_window=TOTP_VALID_WINDOW,
    replay_guard=UsedCodeCache(keep_steps=2 * TOTP_VALID_WINDOW + 1) if TOTP_REJECT_REPLAY else None,
)
del _secret


@app.exception_handler(UploadError)
async def upload_error_handler(request, exc: UploadError):
    body = UploadResponse(filename="", message=exc.message)
    return JSONResponse(body.model_dump(), status_code=exc.status_code)


@app.middleware("http")
async def referrer_policy_middleware(request, call_next):
    response = await call_next(request)
    response.headers["Referrer-Policy"] = "no-referrer"
    return response


if CORS_ENABLED:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

app.include_router(health.router)
app.include_router(pages.router)
app.include_router(upload.router)
