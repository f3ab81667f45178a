"""Internal constants shared across the library."""

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
USER_AGENT = "pygeocode"
STATE_FILENAME = ".geocoder-data"

#: Minimum spacing between request initiations, in seconds.
MIN_REQUEST_INTERVAL: float = 0.02

#: The daily quota resets at midnight in this timezone.
QUOTA_RESET_TIMEZONE = "America/Los_Angeles"

# ------------------------------------------------------------------
# Response status values
# ------------------------------------------------------------------

STATUS_OK = "OK"
STATUS_OVER_QUERY_LIMIT = "OVER_QUERY_LIMIT"
