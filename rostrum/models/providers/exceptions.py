"""Exceptions raised by model providers."""


class ProviderError(Exception):
    """Base class for provider failures."""

    def __init__(self, provider: str, model: str | None, detail: str):
        self.provider = provider
        self.model = model
        self.detail = detail
        target = f"{provider}/{model}" if model else provider
        super().__init__(f"[{target}] {detail}")


class ProviderRateLimitError(ProviderError):
    """Raised when a provider keeps rate limiting after all retries."""

    def __init__(
        self,
        provider: str,
        model: str | None,
        status_code: int = 429,
        detail: str = "Rate limit exceeded",
    ):
        super().__init__(provider, model, detail)
        self.status_code = status_code


class ProviderSchemaError(ProviderError):
    """Raised when structured output does not match the requested schema."""

    def __init__(self, provider: str, model: str | None, detail: str, raw_content: str = ""):
        super().__init__(provider, model, detail)
        self.raw_content = raw_content
