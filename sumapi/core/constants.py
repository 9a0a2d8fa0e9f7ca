"""Application-wide constants."""

SERVICE_NAME = "sumapi"

# ---------------------------------------------------------------------------
# Sum endpoint
# ---------------------------------------------------------------------------
MIN_NUMBERS = 2
MAX_NUMBERS = 100

# ---------------------------------------------------------------------------
# Request correlation
# ---------------------------------------------------------------------------
REQUEST_ID_HEADER = "X-Request-ID"

# ---------------------------------------------------------------------------
# Health checks
# ---------------------------------------------------------------------------
CHECK_OK = "ok"
