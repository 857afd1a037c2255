"""Configuration for the Oliv.ai matcher service."""
import os
from pathlib import Path
from typing import Final

from dotenv import load_dotenv

BASE_DIR: Final[Path] = Path(__file__).resolve().parent.parent

# Load environment variables from .env file if it exists
env_path = BASE_DIR / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Database
DATABASE_URL: Final[str] = os.getenv('DATABASE_URL', 'sqlite:///./oliv.db')

# Bundled mock catalogs used to seed an empty products table
CATALOG_PATH: Final[Path] = Path(
    os.getenv('CATALOG_PATH', str(Path(__file__).resolve().parent / 'data' / 'catalogs.json'))
)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'INFO').upper()
