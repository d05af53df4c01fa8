from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "bootcamp-directory"
    environment: str = "development"
    debug: bool = True

    mongo_port: int = 27017
    mongo_host: str = "localhost"
    mongo_db: str = "bootcamp_directory"
    mongo_password: str | None = None
    mongo_params: str | None = None
    mongo_user: str | None = None
    mongo_srv: bool = False

    jwt_algorithm: str = "HS256"
    jwt_secret_key: str = "very-secret-key"
    jwt_expire_days: int = 30
    jwt_cookie_expire_days: int = 30

    reset_token_expire_minutes: int = 10
    reset_token_bytes: int = 20

    smtp_host: str = "localhost"
    smtp_port: int = 2525
    smtp_user: str | None = None
    smtp_password: str | None = None
    smtp_tls: bool = False
    from_email: str = "noreply@bootcamp-directory.io"
    from_name: str = "Bootcamp Directory"

    model_config = SettingsConfigDict(env_file=(".env",), case_sensitive=True)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def mongo_uri(self) -> str:
        auth = ""
        if self.mongo_user and self.mongo_password:
            auth = f"{self.mongo_user}:{self.mongo_password}@"
        if self.mongo_srv:
            params = self.mongo_params or "retryWrites=true&w=majority"
            return f"mongodb+srv://{auth}{self.mongo_host}/{self.mongo_db}?{params}"
        params = f"?{self.mongo_params}" if self.mongo_params else ""
        return f"mongodb://{auth}{self.mongo_host}:{self.mongo_port}/{self.mongo_db}{params}"


settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency returning the process-wide settings."""
    return settings
