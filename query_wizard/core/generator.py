import logging
import re

from query_wizard.core.exceptions import DomainIdentificationError, QueryGenerationError
from query_wizard.core.providers import GoogleProvider, LLMProvider, OpenAICompatibleProvider
from query_wizard.models.models import DATABASE_PROFILES, ApiProvider, ApiSettings, Database
from query_wizard.utils.constants import APP_LOGGER_NAME
from query_wizard.utils.io_utils import get_prompt

logger = logging.getLogger(f"{APP_LOGGER_NAME}.generator")

UNKNOWN_DOMAIN = "无法识别领域"

_LEADING_FENCE = re.compile(r"^```(sql|text)?")
_TRAILING_FENCE = re.compile(r"```$")


def strip_code_fences(text: str) -> str:
    """モデルが誤って付けた Markdown のコードブロック記号を取り除く"""
    cleaned = text.strip()
    while True:
        stripped = _TRAILING_FENCE.sub("", _LEADING_FENCE.sub("", cleaned)).strip()
        if stripped == cleaned:
            return cleaned
        cleaned = stripped


class SearchStringGenerator:
    """設定に応じてプロバイダーを選び、領域推定と検索式生成を行う"""

    def __init__(
        self,
        default_api_key: str | None = None,
        request_timeout: float | None = None,
        providers: dict[ApiProvider, LLMProvider] | None = None,
    ):
        self.providers = providers or {
            ApiProvider.GOOGLE: GoogleProvider(default_api_key=default_api_key),
            ApiProvider.OPENAI_COMPATIBLE: OpenAICompatibleProvider(timeout=request_timeout),
        }
        self.domain_prompt_template = get_prompt("domain_identification")
        self.search_prompt_template = get_prompt("search_string")

    def generate_content(self, prompt: str, settings: ApiSettings | None = None) -> str:
        provider = settings.provider if settings else ApiProvider.GOOGLE
        if provider not in self.providers:
            provider = ApiProvider.GOOGLE
        logger.debug(f"Dispatching prompt to {provider.value}")
        return self.providers[provider].send(prompt, settings)

    def identify_domain(self, research_description: str, settings: ApiSettings | None = None) -> str:
        """研究内容の説明から上位の研究領域を推定する"""
        if not research_description.strip():
            raise DomainIdentificationError("Research description cannot be empty.")

        prompt = self.domain_prompt_template.format(research_description=research_description)
        logger.info("Identifying research domain")
        try:
            text = self.generate_content(prompt, settings)
        except Exception as e:
            logger.exception("Error identifying domain")
            raise DomainIdentificationError(
                f"Failed to identify domain. Please try manual input. ({e})"
            ) from e

        domain = text.strip()
        if not domain:
            logger.warning("Model returned no domain, using fallback label")
            return UNKNOWN_DOMAIN
        logger.info(f"Identified domain: {domain}")
        return domain

    def build_search_prompt(self, domain: str, database: Database) -> str:
        profile = DATABASE_PROFILES[database]
        return self.search_prompt_template.format(
            domain=domain,
            database=database.value,
            database_instructions=profile.instructions,
        )

    def generate_search_string(
        self, domain: str, database: Database, settings: ApiSettings | None = None
    ) -> str:
        """指定データベース向けの高度な検索式を生成する"""
        if not domain.strip():
            raise QueryGenerationError("Domain cannot be empty.")

        prompt = self.build_search_prompt(domain.strip(), database)
        logger.info(f"Generating search string for '{domain}' on {database.value}")
        try:
            text = self.generate_content(prompt, settings)
        except Exception as e:
            logger.exception("Error generating search string")
            raise QueryGenerationError(f"Failed to generate search string. ({e})") from e

        query = strip_code_fences(text)
        if not query:
            # 空の応答は失敗として扱う
            raise QueryGenerationError("Failed to generate search string. (empty model response)")
        return query
