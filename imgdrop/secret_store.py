"""Persistence of the single shared TOTP secret.

The record is a plain text file holding the base32 secret. It is created
once, on first start, and only read afterwards: regenerating it would lock
out every authenticator that was already provisioned.
"""

import logging
import os
from pathlib import Path

import pyotp

logger = logging.getLogger(__name__)

SECRET_FILE_MODE = 0o600


class SecretStoreError(RuntimeError):
    """The secret record could not be read or written. Fatal at startup."""


class SecretStore:
    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> str | None:
        """Return the stored secret, or None when no record exists yet."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise SecretStoreError(f"failed to load TOTP secret from {self.path}") from e
        secret = raw.strip()
        if not secret:
            raise SecretStoreError(f"TOTP secret file {self.path} is empty")
        try:
            pyotp.TOTP(secret).byte_secret()
        except ValueError as e:
            raise SecretStoreError(f"TOTP secret file {self.path} is not valid base32") from e
        return secret

    def save(self, secret: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, SECRET_FILE_MODE)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(secret)
            # umask may have stripped bits from the create mode
            os.chmod(self.path, SECRET_FILE_MODE)
        except OSError as e:
            raise SecretStoreError(f"failed to save TOTP secret to {self.path}") from e

    def load_or_create(self) -> str:
        secret = self.load()
        if secret is not None:
            logger.info("loaded TOTP secret from %s", self.path)
            return secret
        secret = pyotp.random_base32()
        self.save(secret)
        logger.info("generated and saved new TOTP secret to %s", self.path)
        return secret


def provisioning_uri(secret: str, issuer: str) -> str:
    """otpauth:// URI for enrolling the secret in an authenticator app."""
    return pyotp.TOTP(secret).provisioning_uri(name=issuer, issuer_name=issuer)
