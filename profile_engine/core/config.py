# profile_engine/core/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# Load .env file if it exists, for local development.
# In production, environment variables should be set directly.
if os.path.exists(".env"):
    from dotenv import load_dotenv
    load_dotenv()

APP_VERSION = "3.0.1"


class EngineSettings(BaseSettings):
    app_version: str = APP_VERSION
    log_level: str = "INFO"
    history_key: str = "personality_assessment_v2"
    session_key: str = "assessment_session"
    history_limit: int = 5
    session_max_age_days: int = 7
    data_dir: str = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")

    model_config = SettingsConfigDict(env_prefix='PROFILE_ENGINE_')


class RedisSettings(BaseSettings):
    host: str = "localhost"
    port: int = 6379
    db: int = 0

    model_config = SettingsConfigDict(env_prefix='REDIS_')


def get_settings() -> EngineSettings:
    """Reads the engine settings from the environment on every call."""
    return EngineSettings()


if __name__ == "__main__":
    settings = get_settings()
    print("Engine Configuration:")
    print(f"  Version: {settings.app_version}")
    print(f"  Log level: {settings.log_level}")
    print(f"  History key: {settings.history_key} (limit {settings.history_limit})")
    print(f"  Session key: {settings.session_key} (max age {settings.session_max_age_days} days)")
    print(f"  Data dir: {settings.data_dir}")
    print("\nTo override, set environment variables like PROFILE_ENGINE_LOG_LEVEL or PROFILE_ENGINE_HISTORY_LIMIT.")
