"""Constants for appform"""

# ==================== File Paths ====================
LOG_FILE_DEFAULT = "data/appform.log"
SETTINGS_FILE_DEFAULT = "appform.toml"

# ==================== Server API ====================
API_PREFIX = "/api"
ENDPOINT_APP_CONFIG_GET = f"{API_PREFIX}/apps/config/get"
ENDPOINT_APP_CONFIG_SET = f"{API_PREFIX}/apps/config/set"

# ==================== Timeouts (seconds) ====================
TIMEOUT_HTTP_REQUEST = 30  # 30 seconds - HTTP requests

# ==================== Retry Configuration ====================
HTTP_MAX_RETRIES = 3
HTTP_RETRY_DELAY = 1  # seconds

# ==================== Serialization ====================
JSON_INDENT = 2

# ==================== Form Labels ====================
NEW_TAB_NAME = "New Tab"
DEFAULT_TAB_NAME_FIELD = "name"

# Web icon names used by schemas mapped to platform symbol names
ICON_MAP = {
    "settings": "gear",
    "shield": "shield",
    "list": "list.bullet",
    "users": "person.2",
    "globe": "globe",
    "server": "server.rack",
    "lock": "lock",
    "clock": "clock",
    "database": "cylinder",
    "network": "network",
}
