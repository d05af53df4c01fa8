from bootcamp_directory.utils.base.enums import BaseEnum, UserRole

__all__ = ["BaseEnum", "UserRole"]
