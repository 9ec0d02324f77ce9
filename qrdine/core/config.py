import os

# Database Configuration
# Uses default credentials for local Docker Compose setup
DB_URL = os.getenv("DATABASE_URL", "postgres://user:password@db:5432/qrdine_db")

# Application Metadata
PROJECT_NAME = "QRDine Ordering Platform"
VERSION = "1.0.0"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Tenant defaults
DEFAULT_TABLE_COUNT = int(os.getenv("DEFAULT_TABLE_COUNT", 20)) # Used when a tenant has no table count on file

# Analytics calendar buckets (hour of day, weekday, ...) are computed in this zone
REPORTING_TIMEZONE = os.getenv("REPORTING_TIMEZONE", "UTC")

# When enabled, cross-tenant access renders exactly like a missing record
MASK_FORBIDDEN_AS_NOT_FOUND = os.getenv("MASK_FORBIDDEN_AS_NOT_FOUND", "0").lower() in ("1", "true", "yes")
