from passlib.context import CryptContext


class PasswordHasher:
    """One-way password hashing shared by the auth and user services."""

    def __init__(self, rounds: int = 12) -> None:
        self._pwd = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        return self._pwd.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        return self._pwd.verify(password, password_hash)
