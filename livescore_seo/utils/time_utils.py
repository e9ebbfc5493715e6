from datetime import datetime
from pytz import utc

# Provider seasons and log timestamps are both expressed in UTC
SITE_TZ = utc

def get_current_time() -> datetime:
    """Get current time in the site timezone (UTC)."""
    return datetime.now(SITE_TZ)
