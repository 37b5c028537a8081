# imagia/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _origins(raw: str) -> list[str]:
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "Imagia API Gateway"
    env: str = os.getenv("ENV", "dev")
    api_prefix: str = os.getenv("API_PREFIX", "/api")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))

    # CORS origins for the web/mobile frontends
    CORS_ORIGINS: list[str] = _origins(
        os.getenv("CORS_ORIGINS", "http://imagia2.ieti.site,http://localhost:5173")
    )

    # Create tables on startup (development only, use Aerich migrations otherwise)
    generate_schemas: bool = _flag("GENERATE_SCHEMAS", "false")

    # Ollama generation server
    ollama_api_url: str = os.getenv("OLLAMA_API_URL", "http://127.0.0.1:11434/api")
    ollama_model: str = os.getenv("OLLAMA_MODEL", "llama3.2-vision:latest")
    ollama_timeout: float = float(os.getenv("OLLAMA_TIMEOUT", "30"))

    # SMS gateway
    sms_enabled: bool = _flag("SMS_ENABLED", "true")
    sms_api_url: str = os.getenv("SMS_API_URL", "http://192.168.1.16:8000/api/sendsms/")
    sms_api_token: str | None = os.getenv("SMS_API_TOKEN")
    sms_username: str | None = os.getenv("SMS_USERNAME")
    sms_timeout: float = float(os.getenv("SMS_TIMEOUT", "10"))

    # Quota ceilings per tier
    free_requests: int = int(os.getenv("FREE_REQUESTS", "20"))
    premium_requests: int = int(os.getenv("PREMIUM_REQUESTS", "40"))
    administrator_requests: int = int(os.getenv("ADMINISTRATOR_REQUESTS", "1000000"))

    # Phone verification
    verification_code_ttl_minutes: int = int(os.getenv("VERIFICATION_CODE_TTL_MINUTES", "15"))
    # Set to false to refuse registering straight into the ADMINISTRATOR tier
    allow_admin_signup: bool = _flag("ALLOW_ADMIN_SIGNUP", "true")

    # Default administrator created on first startup (skipped without ADMIN_PASSWORD)
    admin_nickname: str = os.getenv("ADMIN_NICKNAME", "admin")
    admin_phone: str = os.getenv("ADMIN_PHONE", "000000000")
    admin_email: str = os.getenv("ADMIN_EMAIL", "admin@example.com")
    admin_password: str | None = os.getenv("ADMIN_PASSWORD")


settings = Settings()  # Instantiate configuration
