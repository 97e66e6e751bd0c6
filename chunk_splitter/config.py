"""
config.py — Chunk Splitter Configuration
===========================================
"""

import os


class Settings:
    """Chunk splitter configuration from environment."""

    HOST: str = os.getenv("SPLITTER_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("SPLITTER_PORT", "8100"))
    CHUNK_SIZE: int = int(os.getenv("CHUNK_SIZE", "262144"))  # 256 KB
    DATA_DIR: str = os.getenv("SPLITTER_DATA_DIR", "./data")
    MAX_WORKERS: int = int(os.getenv("SPLITTER_MAX_WORKERS", "4"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
