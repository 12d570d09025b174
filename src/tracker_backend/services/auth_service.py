import logging
from sqlalchemy.orm import Session

from ..api.exceptions import BadRequestException, NotFoundException
from ..auth.security import create_access_token, hash_password, verify_password
from ..interface.users import LoginResponse, UserCreate, UserGet, UserUpdate
from ..model.auth import User
from ..repositories.user import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Account registration, login and profile maintenance"""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)

    def register(self, schema: UserCreate) -> UserGet:
        if self.users.find_by_email(schema.email) is not None:
            raise BadRequestException("Email is already registered")
        if self.users.find_by_username(schema.username) is not None:
            raise BadRequestException("Username is already taken")

        user = self.users.create(User(
            username=schema.username,
            email=schema.email,
            password=hash_password(schema.password),
            first_name=schema.first_name,
            last_name=schema.last_name,
            bio=schema.bio,
            role=schema.role,
            avatar=schema.avatar,
        ))
        logger.info(f"Registered user {user.username} ({user.id})")
        return UserGet.model_validate(user)

    def login(self, email: str, password: str) -> LoginResponse:
        user = self.users.find_by_email(email)

        # Same answer for unknown email and wrong password
        if user is None or not verify_password(password, user.password):
            raise BadRequestException("Invalid email or password")

        return LoginResponse(token=create_access_token(user.id), user=UserGet.model_validate(user))

    def get_profile(self, user_id: str) -> UserGet:
        return UserGet.model_validate(self._get_user(user_id))

    def update_profile(self, user_id: str, patch: UserUpdate) -> UserGet:
        user = self._get_user(user_id)

        changes = {k: v for k, v in patch.model_dump(exclude_unset=True).items() if v is not None}
        if not changes:
            return UserGet.model_validate(user)

        if "email" in changes and changes["email"] != user.email:
            if self.users.find_by_email(changes["email"]) is not None:
                raise BadRequestException("Email is already registered")
        if "username" in changes and changes["username"] != user.username:
            if self.users.find_by_username(changes["username"]) is not None:
                raise BadRequestException("Username is already taken")

        user = self.users.update(user, changes)
        logger.info(f"Profile of {user_id} updated: {sorted(changes)}")
        return UserGet.model_validate(user)

    def _get_user(self, user_id: str) -> User:
        user = self.users.get_by_id_optional(user_id)
        if user is None:
            raise NotFoundException("User not found")
        return user
