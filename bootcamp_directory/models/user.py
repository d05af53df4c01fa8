from datetime import datetime
from typing import Optional

from mongoengine import DateTimeField, EmailField, IntField, StringField

from bootcamp_directory.models.base import BaseDocument, as_utc
from bootcamp_directory.utils.base import UserRole


class User(BaseDocument):
    """User document.

    Fields:
    - name (str): Full name
    - email (str, unique): Login identifier, stored lower-cased
    - role (str): user/publisher/admin
    - password (str, hashed): Bcrypt hash, only loaded on request
    - reset_password_token (str|None): SHA-256 of a pending reset token
    - reset_password_expire (datetime|None): when that reset token lapses
    - token_version (int): Bumped to invalidate issued session tokens
    """
    hidden_fields = (
        "password",
        "reset_password_token",
        "reset_password_expire",
        "token_version",
    )

    name = StringField(required=True, null=False)
    email = EmailField(required=True, null=False, unique=True)
    role = StringField(required=True, null=False, default=UserRole.USER.value, choices=UserRole.choices())
    password = StringField(required=True, null=False)
    reset_password_token = StringField(required=False)
    reset_password_expire = DateTimeField(required=False)
    token_version = IntField(required=True, null=False, default=1)

    meta = {
        "collection": "users",
        "indexes": [
            {"fields": ["email"], "unique": True},
            {"fields": ["reset_password_token"]},
        ],
    }

    def clean(self):
        if self.email:
            self.email = self.email.strip().lower()

    @classmethod
    def lookup(cls, with_password: bool = False, **query) -> Optional["User"]:
        """First match for `query`; the password hash is left out unless asked for."""
        queryset = cls.objects(**query)
        if not with_password:
            queryset = queryset.exclude("password")
        return queryset.first()

    @classmethod
    def by_email(cls, email: str, with_password: bool = False) -> Optional["User"]:
        return cls.lookup(with_password=with_password, email=email.strip().lower())

    def reset_pending(self, now: datetime) -> bool:
        """True while a stored reset token exists and has not lapsed."""
        if not self.reset_password_token or self.reset_password_expire is None:
            return False
        return as_utc(self.reset_password_expire) > now
