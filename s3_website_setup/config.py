import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .errors import ConfigError

# Configuration – defaults can be overridden by environment or flags.
DEFAULT_BUCKET = "mozedu-frontend-prod-af"
DEFAULT_REGION = "af-south-1"
DEFAULT_INDEX_DOCUMENT = "index.html"
DEFAULT_ERROR_DOCUMENT = "404.html"
DEFAULT_PROVIDER = "boto3"


@dataclass
class SiteConfig:
    bucket: str = DEFAULT_BUCKET
    region: str = DEFAULT_REGION
    index_document: str = DEFAULT_INDEX_DOCUMENT
    error_document: str = DEFAULT_ERROR_DOCUMENT
    provider: str = DEFAULT_PROVIDER
    assume_yes: bool = False
    interactive: bool = True
    # Visibility wait after creation: first probe after wait_initial_delay,
    # each later delay multiplied by wait_backoff and capped at wait_max_delay
    wait_initial_delay: float = 5.0
    wait_backoff: float = 2.0
    wait_max_attempts: int = 4
    wait_max_delay: float = 30.0
    propagation_delay: float = 3.0
    log_dir: str = field(default_factory=tempfile.gettempdir)

    def validate(self) -> "SiteConfig":
        if not self.bucket or not self.bucket.strip():
            raise ConfigError("Bucket name must not be empty")
        if not self.region or not self.region.strip():
            raise ConfigError("Region must not be empty")
        if not self.index_document or not self.error_document:
            raise ConfigError("Index and error documents must not be empty")
        if self.wait_max_attempts < 1:
            raise ConfigError("wait_max_attempts must be at least 1")
        if self.wait_backoff < 1:
            raise ConfigError("wait_backoff must be at least 1")
        for name in ("wait_initial_delay", "wait_max_delay", "propagation_delay"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must not be negative")
        self._validate_log_dir()
        return self

    def _validate_log_dir(self):
        # log_dir is created on first use, so check the nearest existing ancestor
        path = Path(self.log_dir)
        existing = next((p for p in [path, *path.parents] if p.exists()), None)
        if existing is None:
            return
        if not existing.is_dir():
            raise ConfigError(f"log_dir is not a directory: {self.log_dir}")
        if not os.access(existing, os.W_OK):
            raise ConfigError(f"log_dir is not writable: {self.log_dir}")

    def wait_delays(self):
        "Sleep durations before each visibility probe"
        delays = []
        delay = self.wait_initial_delay
        for _ in range(self.wait_max_attempts):
            delays.append(min(delay, self.wait_max_delay))
            delay *= self.wait_backoff
        return delays


def _first(*values):
    for value in values:
        if value is not None:
            return value
    return None


def load_config(
    bucket: Optional[str] = None,
    region: Optional[str] = None,
    index_document: Optional[str] = None,
    error_document: Optional[str] = None,
    provider: Optional[str] = None,
    log_dir: Optional[str] = None,
    environ=None,
    **overrides,
) -> SiteConfig:
    """
    Build a validated SiteConfig.

    Explicit arguments win over environment variables, which win over the
    built-in defaults. Keyword overrides whose value is None are ignored.
    """
    env = os.environ if environ is None else environ
    config = SiteConfig(
        bucket=_first(bucket, env.get("S3_SITE_BUCKET"), DEFAULT_BUCKET),
        region=_first(region, env.get("AWS_REGION"), DEFAULT_REGION),
        index_document=_first(
            index_document, env.get("S3_SITE_INDEX_DOCUMENT"), DEFAULT_INDEX_DOCUMENT
        ),
        error_document=_first(
            error_document, env.get("S3_SITE_ERROR_DOCUMENT"), DEFAULT_ERROR_DOCUMENT
        ),
        provider=_first(provider, env.get("S3_SITE_PROVIDER"), DEFAULT_PROVIDER),
        log_dir=_first(log_dir, env.get("S3_SITE_LOG_DIR"), tempfile.gettempdir()),
    )
    for key, value in overrides.items():
        if value is None:
            continue
        if not hasattr(config, key):
            raise ConfigError(f"Unknown setting: {key}")
        setattr(config, key, value)
    return config.validate()
