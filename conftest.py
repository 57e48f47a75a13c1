"""Global pytest configuration."""

import os

# Keep the test session off the public routing service
os.environ.setdefault("ROUTE_SERVICE_ENABLED", "false")
