"""Centralised path constants for the application."""

from pathlib import Path

# src/paths.py -> project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent

ENV_FILE = PROJECT_ROOT / ".env"
