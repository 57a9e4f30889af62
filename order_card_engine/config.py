from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Optional

from .fields import DEFAULT_FIELDS, FieldDefinition, load_fields
from .io_utils import read_json_content

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class AppConfig:
    fields_path: Optional[str] = None
    log_level: str = "INFO"
    acting_user_id: str = "u1"


def get_app_config() -> AppConfig:
    return AppConfig(
        fields_path=os.getenv("ORDER_CARD_FIELDS_PATH") or None,
        log_level=os.getenv("ORDER_CARD_LOG_LEVEL", "INFO").upper(),
        acting_user_id=os.getenv("ORDER_CARD_ACTING_USER", "u1"),
    )


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach one stream handler to the package logger. Safe to call twice."""
    logger = logging.getLogger("order_card_engine")
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    if not any(getattr(h, "_order_card_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._order_card_handler = True
        logger.addHandler(handler)
    return logger


def load_configured_fields(config: AppConfig) -> List[FieldDefinition]:
    if not config.fields_path:
        return list(DEFAULT_FIELDS)
    return load_fields(read_json_content(config.fields_path))
