import os
import json
import logging
from typing import Optional, Any, Dict, List
from pydantic_settings import BaseSettings, SettingsConfigDict
from google.cloud import secretmanager
from dotenv import load_dotenv

# Configure Logger
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("config")

def find_env_local():
    """
    Search for .env.local in current directory or parent directories.
    """
    current = os.getcwd()
    # Also check relative to this file
    possible_paths = [
        os.path.join(current, ".env.local"),
        os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))), ".env.local")
    ]

    for path in possible_paths:
        if os.path.exists(path):
            return path
    return None

ENV_LOCAL_PATH = find_env_local()

if ENV_LOCAL_PATH:
    logger.info(f"Initializing using explicitly found file: {ENV_LOCAL_PATH}")
    load_dotenv(ENV_LOCAL_PATH, override=True)
else:
    logger.warning(".env.local not found in standard locations.")

class Settings(BaseSettings):
    """
    Application settings and configuration.
    """
    # [Profile Configuration]
    ENV: str = "local"

    # [Server Configuration]
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 3000
    STATIC_DIR: str = "public"

    # [GCP Configuration]
    GCP_PROJECT_ID: str = "local-development"

    # [Google OAuth / YouTube Configuration]
    GOOGLE_CLIENT_ID: Optional[str] = None
    GOOGLE_CLIENT_SECRET: Optional[str] = None
    GOOGLE_REDIRECT_URI: str = "http://localhost:3000/oauth2callback"
    YOUTUBE_SCOPES: List[str] = ["https://www.googleapis.com/auth/youtube.upload"]
    VIDEO_PRIVACY_STATUS: str = "private"

    # [OpenAI Configuration]
    # 키가 비어 있으면 메타데이터 생성은 항상 기본값(fallback)으로 동작한다.
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o-mini"

    # [Ingestion Configuration]
    UPLOAD_DIR: str = "uploads"
    MAX_FILE_SIZE: int = 128 * 1024 * 1024  # 128MB
    DOWNLOAD_TIMEOUT_SECONDS: float = 300.0  # 5 minutes, wall-clock per attempt
    PROBE_TIMEOUT_SECONDS: float = 10.0
    DOWNLOAD_CHUNK_SIZE: int = 1024 * 1024
    # N retries = N + 1 total attempts (probe & download 공통)
    MAX_RETRIES: int = 3
    RETRY_WAIT_SECONDS: float = 1.0
    USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    )

    model_config = SettingsConfigDict(
        env_file=ENV_LOCAL_PATH,
        env_file_encoding="utf-8",
        extra="ignore"
    )

def fetch_config_from_gsm(env: str, project_id: str) -> Dict[str, Any]:
    """Fetches configuration JSON from Google Secret Manager."""
    secret_id = f"{env}-video-publisher-config"
    logger.info(f"Loading configuration from Secret Manager: {secret_id}")

    try:
        client = secretmanager.SecretManagerServiceClient()
        name = f"projects/{project_id}/secrets/{secret_id}/versions/latest"
        response = client.access_secret_version(request={"name": name})
        return json.loads(response.payload.data.decode("UTF-8"))
    except Exception as e:
        logger.error(f"Failed to load secret '{secret_id}': {e}")
        raise RuntimeError(f"Could not load config for ENV='{env}' from GSM.") from e

def init_settings() -> Settings:
    """Initializes settings based on the execution environment."""
    config = Settings()

    if not ENV_LOCAL_PATH and config.ENV != "local":
        env_profile = os.getenv("ENV")
        project_id = os.getenv("GCP_PROJECT_ID")
        if env_profile and project_id:
            secrets = fetch_config_from_gsm(env_profile, project_id)
            return Settings(**secrets)

    logger.info(f"Loaded Config - Env: {config.ENV}, Upload dir: {config.UPLOAD_DIR}")
    return config

# Global settings instance
settings = init_settings()
