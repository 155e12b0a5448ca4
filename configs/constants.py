"""
Constants
"""

# Ignore pylint warnings
# pylint: disable = line-too-long


class Constants:
    """
    Default configuration for the batch fetcher
    """

    POKEAPI_BASE_URL = "https://pokeapi.co/api/v2"
    POKEMON_ENDPOINT = f"{POKEAPI_BASE_URL}/pokemon"

    DEFAULT_ITEMS = ["bulbasaur", "ivysaur", "venusaur"]
    OUTPUT_DIR = "data/raw/pokemon"
    LOG_FILE = "logs/fetch.log"
    PAYLOAD_EXTENSION = "json"

    MAX_RETRIES = 3
    RETRY_DELAY = 2.0
    BACKOFF_FACTOR = 1.0
    RATE_LIMIT_MULTIPLIER = 2.0
    MAX_WORKERS = 4

    REQUEST_TIMEOUT = 30.0
    PREFLIGHT_TIMEOUT = 5.0

    USER_AGENT = "pokefetch/1.0 (batch-fetcher)"

    # lowercase letters and hyphens, at least three characters
    IDENTIFIER_PATTERN = r"^[a-z-]{3,}$"
