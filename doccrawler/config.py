from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

from .errors import ConfigError

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/100.0.4896.127 Safari/537.36"
)

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Config:
    docs_url_base: str
    docs_root_url: str
    mongo_url: str
    mongo_db: str
    mongo_collection: str
    concurrency: int
    request_timeout_seconds: float
    user_agent: str
    fail_fast: bool
    strict_fragments: bool
    log_level: str


def validate_url(name: str, value: str) -> str:
    p = urlparse(value)
    if p.scheme not in ("http", "https") or not p.hostname:
        raise ConfigError(f"{name} is not an absolute http(s) URL: {value!r}")
    return value


def _parse_bool(name: str, env_value: Optional[str], default: bool) -> bool:
    if env_value is None or not env_value.strip():
        return default
    v = env_value.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {env_value!r}")


def _parse_number(name: str, env_value: Optional[str], default, kind=int):
    if env_value is None or not env_value.strip():
        return default
    try:
        return kind(env_value.strip())
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {env_value!r}") from exc


def load_config() -> Config:
    # Load from .env if present
    load_dotenv(override=False)

    docs_url_base = validate_url(
        "DOCS_URL_BASE", os.getenv("DOCS_URL_BASE", "https://docs.aws.amazon.com/")
    )
    docs_root_url = validate_url(
        "DOCS_ROOT_URL", os.getenv("DOCS_ROOT_URL", "https://docs.aws.amazon.com/ja_jp/")
    )
    mongo_url = os.getenv("MONGO_URL", "mongodb://localhost:27017")
    mongo_db = os.getenv("MONGO_DB", "doccrawler")
    mongo_collection = os.getenv("MONGO_COLLECTION", "aws_docs")
    concurrency = _parse_number("CONCURRENCY", os.getenv("CONCURRENCY"), 1)
    if concurrency < 1:
        raise ConfigError(f"CONCURRENCY must be >= 1, got {concurrency}")
    request_timeout_seconds = _parse_number(
        "REQUEST_TIMEOUT_SECONDS", os.getenv("REQUEST_TIMEOUT_SECONDS"), 30.0, float
    )
    user_agent = os.getenv("USER_AGENT") or DEFAULT_USER_AGENT
    fail_fast = _parse_bool("FAIL_FAST", os.getenv("FAIL_FAST"), True)
    strict_fragments = _parse_bool("STRICT_FRAGMENTS", os.getenv("STRICT_FRAGMENTS"), False)
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"LOG_LEVEL is not a logging level: {log_level!r}")

    return Config(
        docs_url_base=docs_url_base,
        docs_root_url=docs_root_url,
        mongo_url=mongo_url,
        mongo_db=mongo_db,
        mongo_collection=mongo_collection,
        concurrency=concurrency,
        request_timeout_seconds=request_timeout_seconds,
        user_agent=user_agent,
        fail_fast=fail_fast,
        strict_fragments=strict_fragments,
        log_level=log_level,
    )
