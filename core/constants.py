# Remote Host
DEFAULT_HOST = "spaces.im"
DEFAULT_SANDBOX_KEY = "beta"
SANDBOX_COOKIE_NAME = "sandbox"
SOURCEMAP_SUFFIX = ".map"
REVISIONS_PATH = "/js/revisions.json"

# Sync Settings
DEFAULT_CONCURRENCY = 10
DEFAULT_REQUEST_TIMEOUT = 60  # Seconds per request
DEFAULT_CONNECT_TIMEOUT = 10

# Local Files
DEFAULT_LINKS_FILE = "links.json"
DEFAULT_MIRROR_ROOT = "."
DEFAULT_REVISIONS_FILE = "revisions.json"
DEFAULT_COMMIT_MESSAGE_FILE = "commit-message.txt"
DEFAULT_TELEGRAM_MESSAGE_FILE = "telegram-message.txt"

# Report
COMMIT_HEADER_TEMPLATE = "chore: Changed {count} file(s)"
BLOCK_OPEN = "<pre>"
BLOCK_CLOSE = "</pre>"
NEW_FILE_SUFFIX = "new"
INVALID_SOURCEMAP_MESSAGE = "Invalid sourcemap format"

# Root collation order of whitespace and ASCII punctuation; all sort before digits and letters
COLLATION_PUNCTUATION = "\t\n\r _-,;:!?.'\"()[]{}@*/\\&#%`^+<=>|~$"

# Relative time units in milliseconds, largest first
DAY_MS = 24 * 60 * 60 * 1000
TIME_UNITS = (
    ("year", 365 * DAY_MS),
    ("month", (365 / 12) * DAY_MS),
    ("week", 7 * DAY_MS),
    ("day", DAY_MS),
    ("hour", 60 * 60 * 1000),
    ("minute", 60 * 1000),
    ("second", 1000),
)

# Default Configuration Values
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FILE = ""  # Empty disables the file handler
DEFAULT_LOG_FORMAT = "text"  # text or json
DEFAULT_LOG_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_LOG_BACKUP_COUNT = 5
DEFAULT_LOG_TIMEZONE = "UTC"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)
