import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from query_wizard.core.exceptions import ConfigError
from query_wizard.models.models import Config
from query_wizard.utils.constants import DEFAULT_CONFIG_PATH, GOOGLE_API_KEY_ENV, PROMPTS_DIR


def load_config(config_path: str | Path = DEFAULT_CONFIG_PATH) -> Config:
    """設定ファイルを読み込んでPydanticでバリデーションする (ファイルが無ければデフォルト値)"""
    config_path = Path(config_path)
    if not config_path.exists():
        return Config()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return Config(**data)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc
    except (TypeError, ValidationError) as exc:
        raise ConfigError(f"Invalid configuration values in {config_path}: {exc}") from exc


def save_config(config: Config, config_path: str | Path = DEFAULT_CONFIG_PATH) -> None:
    """ConfigオブジェクトをYAMLファイルとして保存する (APIキーは書き出さない)"""
    data = config.model_dump(mode="json", exclude={"api": {"api_key"}})
    with open(config_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)


def load_default_api_key() -> str | None:
    """~/.env と環境変数から Gemini のデフォルト API キーを読み込む"""
    load_dotenv(dotenv_path=Path.home() / ".env")
    return os.getenv(GOOGLE_API_KEY_ENV) or None


def get_prompt(prompt_name: str) -> str:
    """promptsディレクトリからプロンプトを読み込む"""
    prompt_path = PROMPTS_DIR / f"{prompt_name}.txt"
    if not prompt_path.exists():
        raise FileNotFoundError(f"Prompt file not found: {prompt_path}")
    return prompt_path.read_text(encoding="utf-8")
