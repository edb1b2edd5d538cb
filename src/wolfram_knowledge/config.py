import os
from dataclasses import dataclass, field
from functools import lru_cache
from urllib.parse import urlparse

from dotenv import load_dotenv

from wolfram_knowledge.exceptions import ConfigurationError

load_dotenv()

DEFAULT_API_ENDPOINT = "https://api.wolframalpha.com/v2"
DEFAULT_LLM_API_ENDPOINT = "https://www.wolframalpha.com/api/v1/llm-api"

OUTPUT_FORMATS = ("plaintext", "image", "mathml", "sound", "wav")
UNIT_SYSTEMS = ("metric", "imperial")

# Per-call overrides accepted for full queries
QUERY_OPTIONS = ("podstate", "units", "location", "scanner", "format")

# Per-request timeout bounds, in milliseconds
MIN_TIMEOUT_MS = 1_000
MAX_TIMEOUT_MS = 30_000


def _env_str(*names: str) -> str | None:
    """Return the first non-empty value among the given variable names."""
    for name in names:
        value = os.getenv(name)
        if value is not None and value.strip():
            return value.strip()
    return None


def _env_int(name: str, default: int) -> int:
    raw = _env_str(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = _env_str(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables.

    Every field reads its environment variable when the instance is built,
    so explicit keyword arguments always win over the environment.
    """

    # Wolfram|Alpha credentials
    app_id: str = field(default_factory=lambda: _env_str("WOLFRAM_APP_ID", "WOLFRAM_ALPHA_APP_ID") or "")
    cloud_api_key: str | None = field(default_factory=lambda: _env_str("WOLFRAM_CLOUD_API_KEY"))

    # Endpoints
    api_endpoint: str = field(
        default_factory=lambda: _env_str("WOLFRAM_API_ENDPOINT") or DEFAULT_API_ENDPOINT
    )
    llm_api_endpoint: str = field(
        default_factory=lambda: _env_str("WOLFRAM_LLM_API_ENDPOINT") or DEFAULT_LLM_API_ENDPOINT
    )

    # Query defaults
    output_format: str = field(default_factory=lambda: _env_str("WOLFRAM_OUTPUT_FORMAT") or "plaintext")
    timeout_ms: int = field(default_factory=lambda: _env_int("WOLFRAM_TIMEOUT", 10_000))
    units: str = field(default_factory=lambda: _env_str("WOLFRAM_UNITS") or "metric")
    location: str | None = field(default_factory=lambda: _env_str("WOLFRAM_LOCATION"))
    scanners: str | None = field(default_factory=lambda: _env_str("WOLFRAM_SCANNERS"))
    max_results: int = field(default_factory=lambda: _env_int("WOLFRAM_MAX_RESULTS", 5))

    # Result cache
    cache_ttl: int = field(default_factory=lambda: _env_int("WOLFRAM_CACHE_TTL", 3600))  # 1 hour
    cache_max_entries: int = field(default_factory=lambda: _env_int("WOLFRAM_CACHE_MAX_ENTRIES", 200))

    # Retry on 429/5xx
    max_retries: int = field(default_factory=lambda: _env_int("WOLFRAM_MAX_RETRIES", 2))
    retry_delay: float = field(default_factory=lambda: _env_float("WOLFRAM_RETRY_DELAY", 0.25))

    # API
    api_host: str = field(default_factory=lambda: os.getenv("API_HOST", "0.0.0.0"))
    api_port: int = field(default_factory=lambda: _env_int("API_PORT", 8000))
    api_reload: bool = field(default_factory=lambda: os.getenv("API_RELOAD", "false").lower() == "true")

    @property
    def timeout_seconds(self) -> float:
        """Per-request timeout in seconds."""
        return self.timeout_ms / 1000

    @property
    def scanner_list(self) -> list[str]:
        """Scanner tags from the comma-separated setting."""
        if not self.scanners:
            return []
        return [s.strip() for s in self.scanners.split(",") if s.strip()]

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        errors = []

        if not self.app_id:
            errors.append("WOLFRAM_APP_ID (or WOLFRAM_ALPHA_APP_ID) is required")

        for name, url in (
            ("WOLFRAM_API_ENDPOINT", self.api_endpoint),
            ("WOLFRAM_LLM_API_ENDPOINT", self.llm_api_endpoint),
        ):
            parsed = urlparse(url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                errors.append(f"{name} must be an http(s) URL, got {url!r}")

        if self.output_format not in OUTPUT_FORMATS:
            errors.append(f"WOLFRAM_OUTPUT_FORMAT must be one of {list(OUTPUT_FORMATS)}, got {self.output_format!r}")

        if not MIN_TIMEOUT_MS <= self.timeout_ms <= MAX_TIMEOUT_MS:
            errors.append(
                f"WOLFRAM_TIMEOUT must be between {MIN_TIMEOUT_MS} and {MAX_TIMEOUT_MS} ms, got {self.timeout_ms}"
            )

        if self.units not in UNIT_SYSTEMS:
            errors.append(f"WOLFRAM_UNITS must be one of {list(UNIT_SYSTEMS)}, got {self.units!r}")

        if not 1 <= self.max_results <= 10:
            errors.append(f"WOLFRAM_MAX_RESULTS must be between 1 and 10, got {self.max_results}")

        if self.cache_ttl <= 0:
            errors.append(f"WOLFRAM_CACHE_TTL must be positive, got {self.cache_ttl}")

        if self.cache_max_entries <= 0:
            errors.append(f"WOLFRAM_CACHE_MAX_ENTRIES must be positive, got {self.cache_max_entries}")

        if not 0 <= self.max_retries <= 5:
            errors.append(f"WOLFRAM_MAX_RETRIES must be between 0 and 5, got {self.max_retries}")

        if self.retry_delay < 0:
            errors.append(f"WOLFRAM_RETRY_DELAY must not be negative, got {self.retry_delay}")

        if errors:
            raise ConfigurationError("Wolfram configuration validation failed:\n" + "\n".join(errors))

    def public_view(self) -> dict[str, str | int | None]:
        """Effective query settings safe to expose in diagnostics."""
        return {
            "units": self.units,
            "location": self.location,
            "max_results": self.max_results,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def is_configured() -> bool:
    """Check whether a Wolfram|Alpha credential is present in the environment."""
    return _env_str("WOLFRAM_APP_ID", "WOLFRAM_ALPHA_APP_ID") is not None
