class ConfigError(ValueError):
    """認証情報や設定ファイルが不足・不正な場合に送出される"""


class ProviderError(RuntimeError):
    """LLM プロバイダーが失敗ステータスを返した場合に送出される"""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Provider request failed with HTTP {status_code}: {body}")


class GenerationError(RuntimeError):
    """ドメイン操作 (領域推定・検索式生成) の失敗"""


class DomainIdentificationError(GenerationError):
    pass


class QueryGenerationError(GenerationError):
    pass
