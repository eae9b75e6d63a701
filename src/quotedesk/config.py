from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from types import SimpleNamespace
from typing import Mapping, Optional


_BOOLEAN_TRUE = {"1", "true", "yes", "on"}

DEFAULT_MARGIN_PERCENT = 55.0
DEFAULT_TAX1 = ("PPN", 11.0)
DEFAULT_TAX2 = ("PPh", 0.0)
DEFAULT_CURRENCY_SYMBOL = "Rp"


@dataclass(frozen=True)
class Config:
    """Runtime configuration assembled from environment variables and overrides."""

    base_dir: Path
    store_path: Path
    default_margin_percent: float
    tax1_label: str
    tax1_percent: float
    tax2_label: str
    tax2_percent: float
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
    log_level: str = "INFO"
    verbose: bool = False

    @property
    def logging_level(self) -> int:
        if self.verbose:
            return logging.DEBUG
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.INFO


def _to_path(value: object | None) -> Optional[Path]:
    if value is None:
        return None
    if isinstance(value, Path):
        return value.expanduser().resolve()
    text = str(value).strip()
    if not text:
        return None
    return Path(text).expanduser().resolve()


def _to_float(value: object | None) -> Optional[float]:
    if value is None:
        return None
    text = str(value).replace("%", "").strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _to_text(value: object | None) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _flag(value: object | None) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _BOOLEAN_TRUE


def _namespace(overrides: object | None) -> SimpleNamespace:
    if overrides is None:
        return SimpleNamespace()
    if isinstance(overrides, SimpleNamespace):
        return overrides
    if isinstance(overrides, Mapping):
        return SimpleNamespace(**dict(overrides))
    if hasattr(overrides, "__dict__"):
        return SimpleNamespace(**{k: v for k, v in vars(overrides).items()})
    return SimpleNamespace()


def load_config(env: Mapping[str, str], overrides: object | None = None) -> Config:
    """Build a runtime :class:`Config` from environment variables and explicit overrides."""

    base_dir = Path(__file__).resolve().parents[2]
    default_store = (base_dir / "data" / "corporate_data.json").resolve()

    store_path = _to_path(env.get("QUOTEDESK_STORE_PATH")) or default_store
    margin = _to_float(env.get("QUOTEDESK_DEFAULT_MARGIN"))
    tax1_label = _to_text(env.get("QUOTEDESK_TAX1_LABEL")) or DEFAULT_TAX1[0]
    tax1_percent = _to_float(env.get("QUOTEDESK_TAX1_PERCENT"))
    tax2_label = _to_text(env.get("QUOTEDESK_TAX2_LABEL")) or DEFAULT_TAX2[0]
    tax2_percent = _to_float(env.get("QUOTEDESK_TAX2_PERCENT"))
    currency_symbol = _to_text(env.get("QUOTEDESK_CURRENCY_SYMBOL")) or DEFAULT_CURRENCY_SYMBOL
    log_level = _to_text(env.get("QUOTEDESK_LOG_LEVEL")) or "INFO"
    verbose = _flag(env.get("QUOTEDESK_VERBOSE"))

    ns = _namespace(overrides)
    if getattr(ns, "store_path", None):
        store_path = _to_path(ns.store_path) or store_path
    if getattr(ns, "default_margin_percent", None) is not None:
        margin = _to_float(ns.default_margin_percent)
    if getattr(ns, "tax1_label", None):
        tax1_label = str(ns.tax1_label)
    if getattr(ns, "tax1_percent", None) is not None:
        tax1_percent = _to_float(ns.tax1_percent)
    if getattr(ns, "tax2_label", None):
        tax2_label = str(ns.tax2_label)
    if getattr(ns, "tax2_percent", None) is not None:
        tax2_percent = _to_float(ns.tax2_percent)
    if getattr(ns, "log_level", None):
        log_level = str(ns.log_level)
    if getattr(ns, "verbose", False):
        verbose = True

    return Config(
        base_dir=base_dir,
        store_path=store_path,
        default_margin_percent=DEFAULT_MARGIN_PERCENT if margin is None else margin,
        tax1_label=tax1_label,
        tax1_percent=DEFAULT_TAX1[1] if tax1_percent is None else tax1_percent,
        tax2_label=tax2_label,
        tax2_percent=DEFAULT_TAX2[1] if tax2_percent is None else tax2_percent,
        currency_symbol=currency_symbol,
        log_level=log_level,
        verbose=verbose,
    )


__all__ = ["Config", "load_config"]
