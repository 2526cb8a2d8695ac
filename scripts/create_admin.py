import getpass
import os
import sys

from agenda.application.validation import Invalid, validate_new_user
from agenda.core.config import Settings
from agenda.core.security import PasswordHasher
from agenda.infrastructure.persistence.sqlite import SQLitePersistence


def main() -> int:
    settings = Settings()

    name = os.getenv("ADMIN_NAME") or input("Name: ").strip()
    email = os.getenv("ADMIN_EMAIL") or input("Email: ").strip()
    password = getpass.getpass("Password: ")
    confirmation = getpass.getpass("Repeat password: ")

    persistence = SQLitePersistence(settings.database_path)
    try:
        result = validate_new_user(
            {
                "name": name,
                "email": email,
                "password": password,
                "password_confirmation": confirmation,
            },
            persistence.get_user_by_email,
        )
        if isinstance(result, Invalid):
            print(result.message, file=sys.stderr)
            return 1

        hasher = PasswordHasher(rounds=settings.password_hash_rounds)
        user = persistence.create_user(
            name=result.payload["name"],
            email=result.payload["email"],
            password_hash=hasher.hash(result.payload["password"]),
            is_admin=True,
        )
    finally:
        persistence.close()

    print(f"Administrator {user.email} created with id {user.id} in {settings.database_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
