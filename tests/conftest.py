"""Shared test configuration.

The platform settings must exist before the runtime context loads
config.yaml, so they are set before anything from src is imported.
"""

import os

os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key-0123456789")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key-0123456789")

from tests.fixtures import *  # noqa: E402,F401,F403
