import importlib
import sys
from pathlib import Path

import pyotp
import pytest
from fastapi.testclient import TestClient


TEST_TOTP_SECRET = "JBSWY3DPEHPK3PXPJBSWY3DPEHPK3PXP"


def _png_bytes(size: int = 128) -> bytes:
    # Signature + padding; the server only sniffs the leading bytes.
    head = b"\x89PNG\r\n\x1a\n"
    return head + (b"\x00" * max(0, size - len(head)))


@pytest.fixture()
def make_app(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    def _make(secret: str | None = TEST_TOTP_SECRET, **env: str) -> dict:
        secret_file = tmp_path / "secrets" / "totp_secret"
        upload_dir = tmp_path / "uploads"
        if secret is not None and not secret_file.exists():
            secret_file.parent.mkdir(parents=True, exist_ok=True)
            secret_file.write_text(secret, encoding="utf-8")

        monkeypatch.setenv("TOTP_SECRET_FILE", str(secret_file))
        monkeypatch.setenv("UPLOAD_DIR", str(upload_dir))
        for k, v in env.items():
            monkeypatch.setenv(k, v)

        for name in list(sys.modules.keys()):
            if name == "imgdrop" or name.startswith("imgdrop."):
                del sys.modules[name]

        main = importlib.import_module("imgdrop.main")
        return {
            "app": main.app,
            "upload_dir": upload_dir,
            "secret_file": secret_file,
            "secret": secret_file.read_text(encoding="utf-8").strip(),
        }

    return _make


@pytest.fixture()
def app_ctx(make_app) -> dict:
    return make_app()


@pytest.fixture()
def client(app_ctx: dict):
    with TestClient(app_ctx["app"]) as c:
        yield c


@pytest.fixture()
def upload_dir(app_ctx: dict) -> Path:
    return app_ctx["upload_dir"]


@pytest.fixture()
def totp_code(app_ctx: dict) -> str:
    return pyotp.TOTP(app_ctx["secret"]).now()


@pytest.fixture()
def png_bytes():
    return _png_bytes
