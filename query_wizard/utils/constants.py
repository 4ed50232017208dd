from pathlib import Path

APP_LOGGER_NAME = "query_wizard"
DEFAULT_CONFIG_PATH = Path("config.yml")
LOG_DIR = Path("logs")
PROMPTS_DIR = Path(__file__).resolve().parent.parent / "prompts"
GOOGLE_API_KEY_ENV = "GOOGLE_API_KEY"
