"""Password hashing for registration."""

import bcrypt


def hash_password(password: str) -> str:
    """Salted bcrypt hash, stored as text."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    return bcrypt.checkpw(password.encode(), password_hash.encode())
