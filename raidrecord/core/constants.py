"""Core constants for RaidRecord."""

# FFLogs v2 API endpoints
FFLOGS_API_URL = "https://www.fflogs.com/api/v2/client"
FFLOGS_TOKEN_URL = "https://www.fflogs.com/oauth/token"
FFLOGS_GRANT_TYPE = "client_credentials"
FFLOGS_REPORT_URL = "https://www.fflogs.com/reports"

# Difficulty ids used by FFLogs for raid content
DIFFICULTY_ULTIMATE = 100
DIFFICULTY_SAVAGE = 101

# Estimated API points consumed by one tier's combined query
POINTS_PER_TIER = 20

# Fallback for messaging when no rate limit snapshot has been observed yet
DEFAULT_RESET_SECONDS = 3600.0

MS_PER_WEEK = 7 * 24 * 60 * 60 * 1000

# Weekly reset: Tuesday 17:00 in UTC+9 (KST)
RESET_WEEKDAY = 1  # datetime.weekday(): Monday = 0
RESET_HOUR = 17
RESET_UTC_OFFSET_HOURS = 9
AMBIGUOUS_WINDOW_HOURS = 2

DEFAULT_REGION = "KR"
