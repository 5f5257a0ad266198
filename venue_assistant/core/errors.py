class AssistantError(Exception):
    """Base class for answer-pipeline failures."""


class ConfigurationError(AssistantError):
    """Provider cannot be used at all (missing or implausible API key). Never retried."""


class ProviderError(AssistantError):
    """A single failed provider attempt."""

    def __init__(self, provider: str, reason: str, status_code: int | None = None):
        super().__init__(f"{provider}: {reason}")
        self.provider = provider
        self.reason = reason
        self.status_code = status_code


class RateLimited(ProviderError):
    """HTTP 429 from the provider."""

    def __init__(self, provider: str, reason: str = "Rate limited"):
        super().__init__(provider, reason, status_code=429)


class TransientProviderError(ProviderError):
    """Bad status, unparseable body, empty text or a network error."""


class ProviderExhausted(AssistantError):
    def __init__(self, provider: str, attempts: int, last_reason: str):
        super().__init__(f"{provider} failed after {attempts} attempts: {last_reason}")
        self.provider = provider
        self.attempts = attempts
        self.last_reason = last_reason


class RequestCancelled(AssistantError):
    """The caller went away; the provider chain is abandoned."""
