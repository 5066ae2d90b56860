import os
from pathlib import Path

import dj_database_url

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "fallback-secret-key")
DEBUG = os.getenv("DEBUG", "false").lower() == "true"

ALLOWED_HOSTS = ["localhost", "127.0.0.1"]

INSTALLED_APPS = [
    "linetrainer",
    "django.contrib.contenttypes",
]

DATABASE_URL = os.getenv("DATABASE_URL")
if DATABASE_URL:
    DATABASES = {"default": dj_database_url.config(default=DATABASE_URL)}
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "data" / "linetrainer.sqlite3",
        }
    }

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.getenv("TIME_ZONE", "America/Chicago")
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Stockfish or any other UCI engine on the PATH
STOCKFISH_PATH = os.getenv("STOCKFISH_PATH", "stockfish")
ENGINE_SKILL_LEVEL = int(os.getenv("ENGINE_SKILL_LEVEL", "10"))  # 0 to 20
ENGINE_EVAL_DEPTH = int(os.getenv("ENGINE_EVAL_DEPTH", "10"))
ENGINE_MOVE_DEPTH = int(os.getenv("ENGINE_MOVE_DEPTH", "15"))

# pause before the computer answers, so the trainee sees their own move land
COMPUTER_MOVE_DELAY_MS = int(os.getenv("COMPUTER_MOVE_DELAY_MS", "500"))

CUSTOM_LINES_STORAGE_KEY = os.getenv(
    "CUSTOM_LINES_STORAGE_KEY", "chess-trainer-custom-openings"
)
