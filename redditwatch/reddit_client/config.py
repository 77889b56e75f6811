"""Reddit client configuration."""

# Endpoints
OAUTH_BASE_URL = "https://oauth.reddit.com"
TOKEN_URL = "https://www.reddit.com/api/v1/access_token"

# HTTP settings
TIMEOUT = 16
USER_AGENT = "redditwatch/1.0 (by /u/redditwatch)"
MAX_RETRIES = 5
RETRY_BACKOFF = 2.0
RETRY_STATUSES = [429, 500, 502, 503, 504]

# Listing settings
DEFAULT_LIMIT = 25
MAX_LIMIT = 100
DEFAULT_DELAY = 0.5
MAX_EMPTY_PAGES = 2

# Monitoring settings
MONITORING_WAIT_DELAY = 1.5  # seconds per active monitor key
CACHE_FRESHNESS_SECONDS = 15

# Environment variables read by auth.Credentials.from_env()
ENV_APP_ID = "REDDIT_APP_ID"
ENV_APP_SECRET = "REDDIT_APP_SECRET"
ENV_REFRESH_TOKEN = "REDDIT_REFRESH_TOKEN"
ENV_ACCESS_TOKEN = "REDDIT_ACCESS_TOKEN"
ENV_USER_AGENT = "REDDIT_USER_AGENT"

# CLI output
DEFAULT_OUTPUT_DIR = "data"
