import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from bson.objectid import ObjectId
from fastapi import Depends
from mongoengine.errors import NotUniqueError
from mongoengine.errors import ValidationError as DocumentValidationError
from pymongo.errors import PyMongoError

from bootcamp_directory.models.base import utcnow
from bootcamp_directory.models.user import User
from bootcamp_directory.services.auth import (
    NOT_AUTHORIZED,
    TokenResponse,
    generate_reset_token,
    hash_password,
    hash_reset_token,
    issue_session_token,
    pwd_context,
    verify_password,
)
from bootcamp_directory.services.mail import Mailer, get_mailer
from bootcamp_directory.utils.base import UserRole
from bootcamp_directory.utils.config import Settings, get_settings
from bootcamp_directory.utils.errors import (
    AuthenticationError,
    DependencyError,
    InvalidOrExpiredToken,
    NotFoundError,
    PersistenceError,
    ValidationError,
)


logger = logging.getLogger(__name__)

RESET_SUBJECT = "Password reset token"
RESET_MESSAGE = (
    "You are receiving this email because you (or someone else) has requested "
    "the reset of a password. Please make a PUT request to: \n\n {reset_url}"
)


class AuthFlow:
    """Account and password-reset flows over the users collection.

    Failures are raised as `ErrorResponse` subclasses. Successful calls
    return the JSON envelope for the route, or a `TokenResponse` whenever a
    session token is issued.
    """

    def __init__(self, settings: Settings, mailer: Mailer):
        self.settings = settings
        self.mailer = mailer

    def register(
        self,
        name: str,
        email: str,
        password: str,
        role: str = UserRole.USER.value,
    ) -> TokenResponse:
        if role not in UserRole.registrable():
            raise ValidationError(f"Role '{role}' cannot be registered")

        user = User(name=name, email=email, role=role, password=hash_password(password))
        try:
            user.save()
        except NotUniqueError:
            raise ValidationError("Duplicate field value entered")
        except DocumentValidationError as exc:
            raise ValidationError(str(exc))
        except PyMongoError as exc:
            logger.exception("User creation failed")
            raise PersistenceError("User could not be created") from exc

        logger.info("Registered user %s as %s", user.id, user.role)
        return issue_session_token(user, self.settings)

    def login(self, email: Optional[str], password: Optional[str]) -> TokenResponse:
        if not (email or "").strip() or not (password or "").strip():
            raise ValidationError("Please provide an email and password")

        user = User.by_email(email, with_password=True)
        if not user or not user.password:
            # Burn the same bcrypt time as a real check
            pwd_context.dummy_verify()
            logger.warning("Login rejected: unknown account")
            raise AuthenticationError("Invalid credentials")
        if not verify_password(password, user.password):
            logger.warning("Login rejected: bad password for user %s", user.id)
            raise AuthenticationError("Invalid credentials")

        return issue_session_token(user, self.settings)

    def current_user(self, user_id: ObjectId) -> dict:
        user = User.lookup(id=user_id)
        if not user:
            raise AuthenticationError(NOT_AUTHORIZED)
        return {"success": True, "data": user.to_output()}

    def forgot_password(self, email: str, build_reset_url: Callable[[str], str]) -> dict:
        """Store a hashed reset token and mail the plaintext one.

        The token fields are committed before the mail goes out and are
        cleared again if the link cannot be built or sent.
        """
        user = User.by_email(email)
        if not user:
            raise NotFoundError(f"There is no user with the email {email}")

        plain, hashed = generate_reset_token(self.settings.reset_token_bytes)
        expire = datetime.now(timezone.utc) + timedelta(minutes=self.settings.reset_token_expire_minutes)
        User.objects(id=user.id).update_one(
            set__reset_password_token=hashed,
            set__reset_password_expire=expire,
            set__updated_at=utcnow(),
        )

        try:
            message = RESET_MESSAGE.format(reset_url=build_reset_url(plain))
            self.mailer.send(recipient=user.email, subject=RESET_SUBJECT, body=message)
        except Exception as exc:
            logger.exception("Reset mail for user %s could not be sent", user.id)
            User.objects(id=user.id, reset_password_token=hashed).update_one(
                unset__reset_password_token=True,
                unset__reset_password_expire=True,
            )
            raise DependencyError("Email could not be sent") from exc

        logger.info("Reset token issued for user %s", user.id)
        return {"success": True, "data": "Email sent"}

    def reset_password(self, reset_token: str, password: str) -> TokenResponse:
        hashed = hash_reset_token(reset_token)
        user = User.lookup(reset_password_token=hashed)
        if not user or not user.reset_pending(datetime.now(timezone.utc)):
            raise InvalidOrExpiredToken()

        # Filter on the hash too so only one request can consume the token
        consumed = User.objects(id=user.id, reset_password_token=hashed).update_one(
            set__password=hash_password(password),
            set__updated_at=utcnow(),
            unset__reset_password_token=True,
            unset__reset_password_expire=True,
            inc__token_version=1,
        )
        if not consumed:
            raise InvalidOrExpiredToken()

        logger.info("Password reset for user %s", user.id)
        return issue_session_token(User.lookup(id=user.id), self.settings)

    def update_details(
        self,
        user_id: ObjectId,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> dict:
        changes = {}
        if name is not None:
            changes["set__name"] = name
        if email is not None:
            changes["set__email"] = email.strip().lower()

        if changes:
            try:
                User.objects(id=user_id).update_one(set__updated_at=utcnow(), **changes)
            except NotUniqueError:
                raise ValidationError("Duplicate field value entered")

        return self.current_user(user_id)

    def update_password(self, user_id: ObjectId, current_password: str, new_password: str) -> TokenResponse:
        user = User.lookup(with_password=True, id=user_id)
        if not user or not user.password or not verify_password(current_password, user.password):
            raise AuthenticationError("Password is incorrect")

        User.objects(id=user.id).update_one(
            set__password=hash_password(new_password),
            set__updated_at=utcnow(),
            inc__token_version=1,
        )
        return issue_session_token(User.lookup(id=user.id), self.settings)

    def logout(self, user_id: ObjectId) -> dict:
        User.objects(id=user_id).update_one(inc__token_version=1)
        return {"success": True, "data": {}}


def get_auth_flow(
    settings: Settings = Depends(get_settings),
    mailer: Mailer = Depends(get_mailer),
) -> AuthFlow:
    return AuthFlow(settings=settings, mailer=mailer)
