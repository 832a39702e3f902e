"""Infra layer utilities (JSON storage, rate limiting)."""

from .rate_limiter import RateLimiter
from .storage import ensure_file, read_json_file, write_json_file

__all__ = ["RateLimiter", "ensure_file", "read_json_file", "write_json_file"]
