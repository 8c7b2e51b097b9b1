"""
Terminal Rendering

Renders view state to text with the Jinja2 templates shipped in
``tiffin/templates``.
"""

from datetime import datetime
from functools import lru_cache

from jinja2 import Environment, PackageLoader, StrictUndefined

from tiffin.core.config import get_settings


def money(value: float, symbol: str = "") -> str:
    """Whole amounts without decimals, everything else with two."""
    symbol = symbol or get_settings().currency_symbol
    if float(value).is_integer():
        return f"{symbol}{int(value)}"
    return f"{symbol}{value:.2f}"


def timestamp(value: datetime) -> str:
    return value.strftime("%d %b %Y, %I:%M %p")


@lru_cache()
def get_environment() -> Environment:
    env = Environment(
        loader=PackageLoader("tiffin", "templates"),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["money"] = money
    env.filters["timestamp"] = timestamp
    return env


def render(template_name: str, **context) -> str:
    """Render ``template_name`` with the app name always available."""
    context.setdefault("app_name", get_settings().app_name)
    return get_environment().get_template(template_name).render(**context)
