from __future__ import annotations

from smashit.config.models import RequestConfig

__all__ = ["RequestConfig"]
