from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping
from urllib.parse import urlsplit


@dataclass(frozen=True, slots=True)
class RequestConfig:
    url: str
    method: str = "GET"
    count: int = 1
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str | None = None
    timeout_sec: float | None = None  # None: transport default

    def __post_init__(self) -> None:
        if self.count < 1:
            msg = f"count must be at least 1, got {self.count}"
            raise ValueError(msg)
        parts = urlsplit(self.url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            msg = f"Invalid URL: {self.url!r}"
            raise ValueError(msg)
        if not self.method:
            msg = "method must not be empty"
            raise ValueError(msg)
        if self.timeout_sec is not None and self.timeout_sec <= 0:
            msg = f"timeout must be positive, got {self.timeout_sec}"
            raise ValueError(msg)
        for name, value in self.headers.items():
            try:
                name.encode("ascii")
                value.encode("ascii")
            except UnicodeEncodeError:
                msg = f"Header {name!r} must be ASCII"
                raise ValueError(msg) from None
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "headers", dict(self.headers))

    def to_metadata(self) -> Mapping[str, Any]:
        return {
            "url": self.url,
            "method": self.method,
            "count": self.count,
            "headers": dict(self.headers),
            "has_body": self.body is not None,
            "timeout_sec": self.timeout_sec,
        }
