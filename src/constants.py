"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    USAGE_ERROR = 3
    NOT_FOUND = 4


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    # Characters a constraint range token is made of.
    RANGE_CHARS = r"0-9a-zA-Z~><=\-.^*"
    DEV_SUFFIX = "x-dev"

    RELEASE_HISTORY_URL = "https://updates.drupal.org/release-history"
    RELEASE_HISTORY_API = "8.x"
    RELEASE_CHANNEL_PREFIX = "8.x-"
    UNSTABLE_MARKERS = ["alpha", "beta", "rc", "dev", "unstable"]

    COMPOSER_JSON_FILE = "composer.json"
    # (glob, mode) pairs; first match wins.
    DEFAULT_MANIFEST_RULES = [
        ("drupal/core", "core"),
        ("drupal/lightning_*", "lightning"),
    ]

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BASE_DELAY_SEC = 0.3
    HTTP_CACHE_TTL_SEC = 300
