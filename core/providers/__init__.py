"""
Provider clients for third-party labor-market data.

Modules:
- gateway: CachedRequestGateway (fingerprint, cache, HTTP, error classification)
- errors: ProviderError taxonomy
- models: normalized result types
- jobs / forums / trends: per-provider clients
"""
from core.providers.errors import (
    ProviderError,
    ProviderAuthError,
    ProviderRateLimitError,
    ProviderTransportError,
    ProviderResponseError,
)
from core.providers.gateway import CachedRequestGateway, REQUEST_TIMEOUT_SECONDS
from core.providers.models import (
    SearchFilters,
    SalaryRange,
    JobListing,
    MarketSummary,
    ForumPost,
    QuoraQuestion,
    QuoraAnswer,
    TrendArticle,
    ChallengeFrequency,
    TrendStrength,
)
from core.providers.jobs import JobsClient
from core.providers.forums import ForumsClient
from core.providers.trends import TrendsClient

__all__ = [
    'ProviderError',
    'ProviderAuthError',
    'ProviderRateLimitError',
    'ProviderTransportError',
    'ProviderResponseError',
    'CachedRequestGateway',
    'REQUEST_TIMEOUT_SECONDS',
    'SearchFilters',
    'SalaryRange',
    'JobListing',
    'MarketSummary',
    'ForumPost',
    'QuoraQuestion',
    'QuoraAnswer',
    'TrendArticle',
    'ChallengeFrequency',
    'TrendStrength',
    'JobsClient',
    'ForumsClient',
    'TrendsClient',
]
