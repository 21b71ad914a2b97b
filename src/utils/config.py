"""Configuration loading and validation for EduTube Planner."""

import os
import logging
from typing import Dict, List
from pathlib import Path
from dotenv import load_dotenv
from rich.logging import RichHandler

# Get the project root directory (parent of src)
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Load environment variables from .env file in project root
load_dotenv(PROJECT_ROOT / '.env')

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def load_config() -> Dict:
    """Load configuration from environment variables."""
    # Helper function to resolve paths relative to project root
    def resolve_path(path: str, default_relative: str) -> str:
        if not path:
            return str(PROJECT_ROOT / default_relative)
        if Path(path).is_absolute():
            return path
        return str(PROJECT_ROOT / path)

    config = {
        # Required API key
        'gemini_api_key': os.getenv('GEMINI_API_KEY') or os.getenv('API_KEY'),

        # Model configurations
        'gemini_model': os.getenv('GEMINI_MODEL', 'gemini-2.5-flash'),
        'gemini_plan_model': os.getenv('GEMINI_PLAN_MODEL', 'gemini-3-pro-preview'),

        # Request settings
        'request_timeout_seconds': float(os.getenv('REQUEST_TIMEOUT_SECONDS', '180')),

        # Export
        'export_destination_url': os.getenv('EXPORT_DESTINATION_URL', 'https://docs.new'),

        # Logging
        'log_level': os.getenv('LOG_LEVEL', 'WARNING'),
        'log_file': resolve_path(os.getenv('LOG_FILE'), 'edutube_planner.log'),
    }

    return config


def validate_config(config: Dict) -> List[str]:
    """Validate configuration and return list of errors."""
    errors = []

    # Check required API key
    if not config.get('gemini_api_key'):
        errors.append("GEMINI_API_KEY is required")

    if not config.get('gemini_model'):
        errors.append("GEMINI_MODEL must not be empty")
    if not config.get('gemini_plan_model'):
        errors.append("GEMINI_PLAN_MODEL must not be empty")

    timeout = config.get('request_timeout_seconds', 180)
    if not isinstance(timeout, (int, float)) or timeout <= 0:
        errors.append("REQUEST_TIMEOUT_SECONDS must be a positive number")

    log_level = str(config.get('log_level', 'WARNING')).upper()
    if log_level not in LOG_LEVELS:
        errors.append(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")

    return errors


def setup_logging(log_level: str = "WARNING", log_file: str | None = None) -> None:
    """Set up logging configuration with Rich for terminal output."""
    # Clear any existing handlers
    logging.root.handlers.clear()

    # Rich handler for console output, kept quiet so it doesn't break the screens
    rich_handler = RichHandler(
        level=getattr(logging, log_level.upper()),
        show_time=True,
        show_level=True,
        show_path=False,
        rich_tracebacks=True,
        markup=False  # Disable markup to avoid conflicts
    )

    # File handler for plain text logging
    log_file = log_file or str(PROJECT_ROOT / 'edutube_planner.log')
    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))

    # Configure root logger
    logging.basicConfig(
        level=logging.INFO,
        handlers=[rich_handler, file_handler],
        format="%(message)s"
    )

    # Suppress noisy third-party loggers
    noisy_loggers = [
        'httpx',
        'httpcore',
        'google_genai',
        'google_genai.models',
        'urllib3.connectionpool',
        'asyncio',
    ]

    for logger_name in noisy_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
