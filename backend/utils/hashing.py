from passlib.context import CryptContext
from passlib.exc import MissingBackendError


password_context = CryptContext(
    schemes=["pbkdf2_sha256", "bcrypt"],
    default="pbkdf2_sha256",
    deprecated="auto",
)


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return password_context.verify(plain, hashed)
    except (ValueError, TypeError):
        # Unknown or malformed hash
        return False
    except MissingBackendError:
        # bcrypt hash without the bcrypt package installed
        return False


def get_password_hash(password: str) -> str:
    return password_context.hash(password)
