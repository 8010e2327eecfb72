from pydantic_settings import BaseSettings
from dotenv import load_dotenv


load_dotenv()


class Settings(BaseSettings):
    app_name: str = "Storefront Supply API"
    debug: bool = False
    database_url: str = "sqlite:///./storefront.db"
    host: str = "127.0.0.1"
    port: int = 8000
    secret_key: str = ""
    access_token_expire_minutes: int = 15
    refresh_token_expire_minutes: int = 60 * 24 * 7
    allowed_hosts: str = ""

    # Bootstrap administrator (see seed.py)
    admin_email: str = "admin@example.com"
    admin_password: str = ""
    admin_name: str = "Administrator"


settings = Settings()

if not settings.secret_key:
    raise RuntimeError("Secret key not configured.")
