from enum import Enum


class BaseEnum(Enum):
    @classmethod
    def choices(cls):
        return [(item.value, item.name) for item in cls]


class UserRole(BaseEnum):
    USER = "user"
    PUBLISHER = "publisher"
    ADMIN = "admin"

    @classmethod
    def registrable(cls) -> list[str]:
        """Roles a caller may pick for themselves at signup."""
        return [cls.USER.value, cls.PUBLISHER.value]
