import os
from dataclasses import dataclass

DEFAULT_LISTING_URL = "https://typeracerdata.com/texts"
DEFAULT_DETAIL_URL = "https://data.typeracer.com/pit/text_info?id={id}"
DEFAULT_TIMEOUT = 15.0
DEFAULT_USER_AGENT = "texts-crawler/0.1"


@dataclass(frozen=True)
class Settings:
    listing_url: str = DEFAULT_LISTING_URL
    detail_url: str = DEFAULT_DETAIL_URL
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    log_level: str = "INFO"


def _load_env_from_file():
    """Load environment variables from a .env file at the project root if present.

    Only sets variables that aren't already present in the process environment.
    """
    root_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    env_path = os.path.join(root_dir, ".env")
    if not os.path.isfile(env_path):
        return
    with open(env_path, "r", encoding="utf-8") as f:
        for line in f:
            s = line.strip()
            if not s or s.startswith("#") or "=" not in s:
                continue
            key, val = s.split("=", 1)
            key = key.strip()
            val = val.strip().strip('"').strip("'")
            if key and not os.environ.get(key):
                os.environ[key] = val


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {name} must be a number, got {raw!r}") from exc


def get_settings() -> Settings:
    """Build Settings from the environment (and .env), applying defaults.

    The detail URL must contain an ``{id}`` placeholder.
    """
    _load_env_from_file()

    detail_url = os.getenv("TEXTS_DETAIL_URL") or DEFAULT_DETAIL_URL
    if "{id}" not in detail_url:
        raise RuntimeError(f"TEXTS_DETAIL_URL must contain an '{{id}}' placeholder, got {detail_url!r}")
    try:
        detail_url.format(id=0)
    except (KeyError, IndexError, ValueError) as exc:
        raise RuntimeError(f"TEXTS_DETAIL_URL may only use the '{{id}}' placeholder, got {detail_url!r}") from exc

    return Settings(
        listing_url=os.getenv("TEXTS_LISTING_URL") or DEFAULT_LISTING_URL,
        detail_url=detail_url,
        timeout=_get_float("TEXTS_HTTP_TIMEOUT", DEFAULT_TIMEOUT),
        user_agent=os.getenv("TEXTS_USER_AGENT") or DEFAULT_USER_AGENT,
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
