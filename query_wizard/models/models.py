from enum import Enum
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field


class ApiProvider(str, Enum):
    GOOGLE = "Google Gemini"
    OPENAI_COMPATIBLE = "OpenAI Compatible"


class ApiSettings(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    provider: ApiProvider = ApiProvider.GOOGLE
    api_key: str | None = None
    base_url: str | None = None
    # 空文字の場合は各プロバイダーのデフォルトモデルを使う
    model_name: str = ""


class Database(str, Enum):
    SCOPUS = "Scopus"
    PUBMED = "PubMed"
    CNKI = "CNKI (知网)"
    WOS = "Web of Science"


class DatabaseProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    instructions: str = Field(description="Syntax rules embedded in the search-string prompt.")
    search_url: str = Field(description="Advanced search page of the database.")
    hint: str = Field(description="Short syntax label shown on the database picker.")


DATABASE_PROFILES = MappingProxyType({
    Database.SCOPUS: DatabaseProfile(
        instructions=(
            '- Use "TITLE-ABS-KEY" for the inclusion part.\n'
            '- Use "AND NOT TITLE" for the exclusion part.\n'
            '- Format Example: TITLE-ABS-KEY("term1" OR "term2") AND NOT TITLE("unwanted term")'
        ),
        search_url="https://www.scopus.com/search/form.uri?display=advanced",
        hint="TITLE-ABS-KEY & AND NOT TITLE",
    ),
    Database.PUBMED: DatabaseProfile(
        instructions=(
            '- Use "[Title/Abstract]" for the inclusion part.\n'
            '- Use "NOT ...[Title]" for the exclusion part.\n'
            "- Use MeSH terms if highly relevant, but prioritize keywords with [Title/Abstract].\n"
            '- Format Example: ("term1"[Title/Abstract] OR "term2"[Title/Abstract]) NOT ("unwanted term"[Title])'
        ),
        search_url="https://pubmed.ncbi.nlm.nih.gov/advanced/",
        hint="[Title/Abstract] & MeSH",
    ),
    Database.CNKI: DatabaseProfile(
        instructions=(
            "- STRICTLY follow CNKI Professional Search syntax rules.\n"
            "- Fields: SU=Subject (Theme), TI=Title, KY=Keywords, AB=Abstract.\n"
            "- Logic Operators:\n"
            "  - AND: Use 'AND'\n"
            "  - OR: Use '|' (vertical bar)\n"
            "  - NOT: Use '!' (exclamation mark)\n"
            "- Syntax:\n"
            "  - Use single quotes for all terms, e.g., SU='term'.\n"
            "  - Group terms with parentheses.\n"
            "- Structure:\n"
            "  - Broad inclusion using Subject (SU) or Title (TI).\n"
            "  - Exclusion using Title (TI).\n"
            "- Example: (SU='人工智能' | SU='深度学习') AND !TI='综述'"
        ),
        search_url="https://kns.cnki.net/kns8/AdvSearch",
        hint="SU=主题, | 或者, ! 非",
    ),
    Database.WOS: DatabaseProfile(
        instructions=(
            "- Use Web of Science Core Collection Advanced Search syntax.\n"
            "- Fields: TS=Topic (searches Title, Abstract, Author Keywords, Keywords Plus), TI=Title.\n"
            "- Operators: AND, OR, NOT.\n"
            '- Structure: TS=("term1" OR "term2") NOT TI=("unwanted")'
        ),
        search_url="https://www.webofscience.com/wos/woscc/advanced-search",
        hint="TS=主题, TI=标题",
    ),
})


class LoggingConfig(BaseModel):
    level: str = "INFO"


class Config(BaseModel):
    api: ApiSettings = Field(default_factory=ApiSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    # OpenAI 互換エンドポイントへのリクエストのタイムアウト秒数 (None は無制限)
    request_timeout: float | None = None
