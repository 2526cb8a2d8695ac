from dataclasses import dataclass

from ..application.services.auth_service import AuthService
from ..application.services.avatar_service import AvatarService
from ..application.services.user_service import UserService
from ..domain.ports.persistence import PersistenceGateway
from .config import Settings
from .security import PasswordHasher


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    persistence: PersistenceGateway
    password_hasher: PasswordHasher
    auth_service: AuthService
    user_service: UserService
    avatar_service: AvatarService
