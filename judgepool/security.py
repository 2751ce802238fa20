import hashlib
import re
import secrets

from beanie import PydanticObjectId
from passlib.context import CryptContext

from judgepool.config import settings

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

_NON_ALPHA = re.compile(r"[^a-z]")


def create_session_token() -> str:
    return secrets.token_urlsafe(settings.session_token_length)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def verify_admin_key(key: str) -> bool:
    return secrets.compare_digest(key.encode(), settings.admin_api_key.get_secret_value().encode())


def normalize_judge_name(name: str) -> str:
    """Lower-case the name and keep ASCII letters only.

    Two spellings that normalize to the same string ("Ada L." and "adal") are the
    same judge, which is what lets a returning judge resume by typing their name.
    """
    return _NON_ALPHA.sub("", name.lower())


def derive_judge_key(group_id: PydanticObjectId, normalized_name: str) -> str:
    return hashlib.sha256(f"{group_id}:{normalized_name}".encode()).hexdigest()
