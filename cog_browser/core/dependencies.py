from typing import Optional
import os

from cog_browser.domain.models import BrowserConfig
from cog_browser.services.index_fetcher import IndexFetcher

INDEX_URL_ENV_VAR = "RED_INDEX_URL"
PER_PAGE_ENV_VAR = "COG_BROWSER_PER_PAGE"
FETCH_TIMEOUT_ENV_VAR = "COG_BROWSER_FETCH_TIMEOUT"
FETCH_ATTEMPTS_ENV_VAR = "COG_BROWSER_FETCH_ATTEMPTS"

_config: Optional[BrowserConfig] = None
_index_fetcher: Optional[IndexFetcher] = None


def load_config_from_env() -> BrowserConfig:
    """
    Build the configuration from environment variables.

    Unset or empty variables fall back to the model defaults.
    """
    env_fields = {
        "index_url": INDEX_URL_ENV_VAR,
        "per_page": PER_PAGE_ENV_VAR,
        "fetch_timeout_seconds": FETCH_TIMEOUT_ENV_VAR,
        "fetch_attempts": FETCH_ATTEMPTS_ENV_VAR,
    }
    values = {}
    for field, env_var in env_fields.items():
        raw = os.environ.get(env_var)
        if raw:
            values[field] = raw
    return BrowserConfig(**values)


def get_config() -> BrowserConfig:
    global _config
    if _config is None:
        _config = load_config_from_env()
    return _config


def get_index_fetcher() -> IndexFetcher:
    global _index_fetcher
    if _index_fetcher is None:
        _index_fetcher = IndexFetcher(get_config())
    return _index_fetcher
