from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv


load_dotenv()  # Load environment variables from a .env file if present

class Config(BaseSettings):
    """
    Application configuration settings.
    Reads from environment variables by default.
    """
    PROJECT_NAME: str = "OGP Verification Service"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api/v1"

    # Client Settings
    API_BASE_URL: str = "http://localhost:8080"

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"

    # Fetch Settings
    FETCH_TIMEOUT: int = 10  # seconds
    USER_AGENT: str = "OGP-Verification-Service/1.0"
    ALLOW_PRIVATE_HOSTS: bool = False

    # Rate Limiting
    RATE_LIMIT_REQUESTS: int = 10
    RATE_LIMIT_WINDOW: int = 60  # seconds

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


config = Config()
