"""
Constants for ads_library_analyzer package.

Centralizes the heuristic numbers and literal marker strings used by the
estimation pipeline. All of these are tunable guesses, not business rules.
"""

# Ad library search endpoint (public keyword search)
AD_LIBRARY_BASE = "https://www.facebook.com/ads/library/"
DEFAULT_COUNTRY = "US"

# Date range choices offered to callers (days)
DATE_RANGE_OPTIONS = (1, 3, 7, 30, 90)
DEFAULT_DATE_RANGE_DAYS = 7

# New-ad ratio step function: (max_days, ratio) evaluated with <=, then fallback
NEW_AD_RATIO_STEPS = ((7, 0.15), (30, 0.25))
NEW_AD_RATIO_DEFAULT = 0.4

# Tier weighting
HANDLE_SPONSORED_FRACTION = 0.7
DOMAIN_SPONSORED_FRACTION = 0.5
NAME_SPONSORED_FRACTION = 0.3
NONE_CONTAINER_FRACTION = 0.2

# Tier ceilings
HANDLE_CAP = 200
DOMAIN_CAP = 75
NAME_CAP = 25
NONE_CAP = 10

# Low count correction (HANDLE and DOMAIN tiers only)
LOW_COUNT_THRESHOLD = 3
LOW_COUNT_SPONSORED_CAP = 15

# Phrases the ad library shows when a search returns nothing (lowercase)
NO_RESULTS_PHRASES = (
    "no ads match your search",
    "no results found",
    "no ads found",
    "we couldn't find any ads",
    "we didn't find any ads",
    "no se encontraron anuncios",
    "aucune publicité",
    "keine werbeanzeigen gefunden",
    "nenhum anúncio encontrado",
)

# Marker tokens (lowercase)
SPONSORED_MARKER = "sponsored"
AD_LABEL_PATTERN = r">\s*ad\s*<"
AD_CONTAINER_MARKERS = (
    "library id",
    'data-testid="ad-library-card"',
    'data-testid="ad_library_card"',
    'role="article"',
)

# Company-name suffixes stripped when deriving handle variants
BUSINESS_SUFFIXES = (
    "incorporated",
    "corporation",
    "company",
    "limited",
    "group",
    "corp",
    "inc",
    "llc",
    "ltd",
    "plc",
    "gmbh",
)

# Handles shorter than or equal to this are discarded
MIN_HANDLE_LENGTH = 2

# Rate limiting: fixed delay between companies (seconds)
DEFAULT_REQUEST_INTERVAL = 5.0

# Fetch defaults
DEFAULT_FETCH_TIMEOUT = 60
DEFAULT_RENDER_WAIT_MS = 5000
DEFAULT_VIEWPORT = (1920, 1080)
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# LLM defaults
DEFAULT_LLM_MODEL = "gpt-4"
LLM_TEMPERATURE = 0.2
LLM_MAX_TOKENS = 300
