import logging
import re
import uuid
from dataclasses import dataclass
from pathlib import Path

from imgdrop.errors import BadRequest, InternalError, UnsupportedMediaType

logger = logging.getLogger(__name__)

ALLOWED_TYPES = {"image/jpeg", "image/png", "image/gif"}
EXTENSION_RE = re.compile(r"^\.[A-Za-z0-9]{1,16}$")
SNIFF_BYTES = 512


@dataclass(frozen=True)
class UploadedAsset:
    original_filename: str
    content_type: str
    content: bytes
    storage_name: str
    path: Path

    @property
    def size(self) -> int:
        return len(self.content)


def sniff_image_type(head: bytes) -> str | None:
    if head.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if head.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if head[:6] in (b"GIF87a", b"GIF89a"):
        return "image/gif"
    return None


def file_extension(filename: str | None) -> str:
    """Extension of the last path component of a client filename, dot included."""
    name = (filename or "").replace("\\", "/").rsplit("/", 1)[-1]
    dot = name.rfind(".")
    ext = name[dot:] if dot >= 0 else ""
    if not EXTENSION_RE.match(ext):
        raise BadRequest("File does not have a valid extension.")
    return ext


def new_storage_name(ext: str) -> str:
    return f"{uuid.uuid4()}{ext}"


def save_image(filename: str | None, content: bytes, upload_dir: Path) -> UploadedAsset:
    """Validate an uploaded image and write it under a fresh random name."""
    content_type = sniff_image_type(content[:SNIFF_BYTES])
    if content_type not in ALLOWED_TYPES:
        raise UnsupportedMediaType()
    ext = file_extension(filename)
    name = new_storage_name(ext)

    try:
        upload_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.exception("cannot create upload dir %s", upload_dir)
        raise InternalError("Unable to create upload directory.") from e

    out = upload_dir / name
    created = False
    try:
        with out.open("xb") as w:
            created = True
            w.write(content)
    except OSError as e:
        logger.exception("cannot write upload %s", out)
        if created:
            out.unlink(missing_ok=True)
        raise InternalError("Unable to save the file.") from e

    logger.info("stored upload: name=%s type=%s size=%s", name, content_type, len(content))
    return UploadedAsset(
        original_filename=filename or "",
        content_type=content_type,
        content=content,
        storage_name=name,
        path=out,
    )
