from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from ``SILENCER_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SILENCER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── Alertmanager ─────────────────────────────────────
    alertmanager_url: str = "http://localhost:9093"
    api_path: str = "/api/v2"

    # ── HTTP Transport ───────────────────────────────────
    request_timeout_seconds: float = 10.0
    verify_tls: bool = True
    ca_bundle: str | None = None

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"

    @property
    def api_base_url(self) -> str:
        """Alertmanager API root, e.g. ``http://alertmanager:9093/api/v2``."""
        return self.alertmanager_url.rstrip("/") + "/" + self.api_path.strip("/")

    @property
    def tls_verify(self) -> bool | str:
        """Value for httpx's ``verify`` argument."""
        if not self.verify_tls:
            return False
        return self.ca_bundle or True


@lru_cache
def get_settings() -> Settings:
    return Settings()
