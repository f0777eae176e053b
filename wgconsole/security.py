import base64
from cryptography.fernet import Fernet, InvalidToken
from hashlib import sha256
from typing import Optional


def _derive_key_from_secret(secret: str) -> bytes:
    # Fernet wants a urlsafe-base64 32-byte key
    digest = sha256(secret.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest)


class SecretBox:
    """Symmetric wrapper used for the router password stored in the profile blob."""

    def __init__(self, secret: str):
        self._fernet = Fernet(_derive_key_from_secret(secret))

    def encrypt(self, plaintext: str) -> str:
        if not plaintext:
            return ""
        token = self._fernet.encrypt(plaintext.encode("utf-8"))
        return token.decode("utf-8")

    def decrypt(self, token: str) -> Optional[str]:
        if not token:
            return ""
        try:
            data = self._fernet.decrypt(token.encode("utf-8"))
            return data.decode("utf-8")
        except InvalidToken:
            return None
