from __future__ import annotations

import os
from pathlib import Path

from fastapi import FastAPI

from stockview.api.router import create_app
from stockview.services.session import InventorySession
from stockview.utils.config import get_data_root, load_store_config
from stockview.utils.logging import configure_logging


def _ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def prepare_data_directories() -> Path:
    data_root = get_data_root()
    logs_dir = Path(os.getenv("STOCKVIEW_LOG_DIR", data_root / "logs")).expanduser()

    _ensure_directory(data_root)
    _ensure_directory(load_store_config(data_root).directory)
    _ensure_directory(logs_dir)
    return logs_dir


def create_application() -> FastAPI:
    """Application factory for ASGI servers (``--factory stockview.main:create_application``)."""
    logs_dir = prepare_data_directories()
    configure_logging(log_path=logs_dir / "app.log")
    return create_app(session=InventorySession())
