from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SIGREPORT_", env_file=".env", case_sensitive=False)

    service_name: str = "sigreport"
    log_level: str = "INFO"

    # Политика по умолчанию для пустого идентификатора
    default_policy: str = "POLv4"

    # Хэш проверяемого документа выводится только при подписи отчёта
    report_signature_enabled: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
