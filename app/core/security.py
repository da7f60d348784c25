import base64
import hashlib
import hmac
import secrets
from dataclasses import dataclass

from app.core.config import settings

KEY_SCHEME = "ahk"


@dataclass(frozen=True)
class ApiKeyParts:
    prefix: str
    plain: str
    hashed: str


def generate_api_key(prefix_len: int = 8) -> ApiKeyParts:
    # ahk_<prefix>_<random>; only the prefix and the hash are stored
    raw = secrets.token_urlsafe(32)
    prefix = raw[:prefix_len]
    plain = f"{KEY_SCHEME}_{prefix}_{raw}"
    return ApiKeyParts(prefix=prefix, plain=plain, hashed=hash_api_key(plain))


def hash_api_key(plain: str) -> str:
    pepper = settings.api_key_pepper.get_secret_value().encode("utf-8")
    digest = hmac.new(pepper, plain.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("utf-8")
