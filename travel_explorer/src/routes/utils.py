"""
Shared helpers for route handlers: query-string parsing and engine access
"""

import math
from typing import Optional

from quart import request

from travel_explorer.providers.base import ProviderNotAvailableError


class ParamError(ValueError):
    """A missing or malformed query parameter; answered with 400."""


def str_arg(name: str) -> str:
    value = (request.args.get(name) or "").strip()
    if not value:
        raise ParamError(f"{name} required")
    return value


def float_arg(
    name: str,
    default: Optional[float] = None,
    low: Optional[float] = None,
    high: Optional[float] = None,
) -> float:
    raw = (request.args.get(name) or "").strip()
    if not raw:
        if default is None:
            raise ParamError(f"{name} required")
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ParamError(f"{name} must be a number")
    if not math.isfinite(value):
        raise ParamError(f"{name} must be a number")
    if (low is not None and value < low) or (high is not None and value > high):
        raise ParamError(f"{name} out of range")
    return value


def int_arg(name: str) -> int:
    raw = (request.args.get(name) or "").strip()
    if not raw:
        raise ParamError(f"{name} required")
    try:
        return int(raw)
    except ValueError:
        raise ParamError(f"{name} must be an integer")


def lat_lon_args():
    return float_arg("lat", low=-90.0, high=90.0), float_arg("lon", low=-180.0, high=180.0)


def get_engine():
    """The engine built at startup; raises if the server is not serving yet."""
    from travel_explorer.src import app as appmod

    if appmod.content_engine is None:
        raise ProviderNotAvailableError("content engine not started", provider_name="engine")
    return appmod.content_engine
