import logging

from fastapi import APIRouter, Depends
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import Request

from imgdrop.auth import get_verifier, require_totp
from imgdrop.config import MAX_BYTES, UPLOAD_DIR
from imgdrop.errors import BadRequest, InternalError, PayloadTooLarge, Unauthorized
from imgdrop.models import UploadResponse
from imgdrop.storage import save_image
from imgdrop.totp import TotpVerifier

router = APIRouter(tags=["upload"])
logger = logging.getLogger(__name__)

TOKEN_FIELD = "totp_token"
FILE_FIELD = "image"


async def read_body(request: Request, max_bytes: int) -> bytes:
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > max_bytes:
        raise PayloadTooLarge()
    chunks = []
    total = 0
    async for chunk in request.stream():
        total += len(chunk)
        if total > max_bytes:
            raise PayloadTooLarge()
        chunks.append(chunk)
    return b"".join(chunks)


async def parse_form(request: Request, body: bytes) -> FormData:
    async def receive():
        return {"type": "http.request", "body": body, "more_body": False}

    try:
        return await Request(request.scope, receive).form()
    # python-multipart parse errors are ValueErrors, a missing boundary a KeyError.
    # An unparseable body carries no token, so it fails authentication.
    except (MultiPartException, StarletteHTTPException, KeyError, ValueError) as e:
        logger.warning("upload rejected: unparseable form body (%s)", e)
        raise Unauthorized() from e


@router.post("/upload", response_model=UploadResponse)
async def upload(request: Request, verifier: TotpVerifier = Depends(get_verifier)):
    client = request.client.host if request.client else "unknown"
    try:
        body = await read_body(request, MAX_BYTES)
    except PayloadTooLarge:
        logger.warning("upload rejected: body over %s bytes from %s", MAX_BYTES, client)
        raise
    form = await parse_form(request, body)
    try:
        require_totp(form.get(TOKEN_FIELD), verifier, client)
        item = form.get(FILE_FIELD)
        if not isinstance(item, UploadFile):
            raise BadRequest("Unable to retrieve file from form data.")
        try:
            content = await item.read()
        except OSError as e:
            logger.exception("cannot read uploaded file")
            raise InternalError("Unable to read file.") from e
        asset = save_image(item.filename, content, UPLOAD_DIR)
    finally:
        await form.close()
    return UploadResponse(filename=asset.storage_name, message="File uploaded successfully")
