from __future__ import annotations
import os
from pathlib import Path

class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    BASE_DIR = Path(__file__).resolve().parent
    # SQLite file in project directory
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'app.db'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # семестр «по умолчанию» для списка курсов, если клиент его не передал
    DEFAULT_SEMESTER = os.getenv("DEFAULT_SEMESTER", "20153")

class DevConfig(BaseConfig):
    DEBUG = True
    SEED_TEST_DATA = True

class ProdConfig(BaseConfig):
    DEBUG = False
    SEED_TEST_DATA = False

config_map = {
    "dev": DevConfig,
    "prod": ProdConfig,
    "default": DevConfig,
}
