"""Node type tags and defaults shared across pressflow."""

TRIGGER = "trigger"
NEWS_DISCOVERY = "news-discovery"
RSS_AGGREGATOR = "rss-aggregator"
SCHOLAR_SEARCH = "google-scholar-search"
PERPLEXITY_RESEARCH = "perplexity-research"
MULTI_SOURCE_SYNTHESIZER = "multi-source-synthesizer"
AI_PROCESSOR = "ai-processor"
FILTER = "filter"
PUBLISHER = "publisher"

DEFAULT_MAX_CONCURRENCY = 5
DEFAULT_SERVICE_TIMEOUT = 30.0

# Relative discovery windows, in hours.
TIME_RANGE_PRESETS = {
    "hour": 1,
    "day": 24,
    "week": 7 * 24,
    "month": 30 * 24,
}
