"""Shared constants for schedule sync."""

# OAuth / Google endpoints
GOOGLE_OAUTH_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_CALENDAR_API_BASE_URL = "https://www.googleapis.com/calendar/v3"
CALENDAR_SCOPE = "https://www.googleapis.com/auth/calendar"
JWT_BEARER_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"

# Assertion lifetime and cache safety margin (seconds)
ASSERTION_LIFETIME_SECONDS = 3600
TOKEN_EXPIRY_MARGIN_SECONDS = 60

# Event identity
EVENT_KEY_SEPARATOR = "::"
EVENT_KEY_MARKER = "Key:"
EVENT_DESCRIPTION_NOTE = "Synced from daily note"

# Daily notes
DOCUMENT_EXTENSION = ".md"
DEFAULT_SETTINGS_FILENAME = "data.json"
