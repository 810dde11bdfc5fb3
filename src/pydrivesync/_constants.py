"""Internal constants shared across the library."""

USER_AGENT = "pydrivesync"

# ------------------------------------------------------------------
# Identity service endpoints (relative to ``config.auth_path``)
# ------------------------------------------------------------------

TOKEN_ENDPOINT = "/token"
LOGOUT_ENDPOINT = "/logout"

# ------------------------------------------------------------------
# Collections
# ------------------------------------------------------------------

SYSTEM_CONFIG = "system_config"
USERS = "users"
DRIVERS = "drivers"
VEHICLES = "vehicles"
TRIPS = "trips"
PASSENGERS = "passengers"
FUEL_RECORDS = "fuel_records"
MAINTENANCE_REMINDERS = "maintenance_reminders"

ALL_FIELDS = "*"

#: Days before a driver's licence expiry at which it is flagged.
LICENSE_EXPIRY_WARNING_DAYS = 30
