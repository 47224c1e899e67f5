"""Root pytest configuration.

Settings are cached on first import, so the test environment has to be in
place before anything from ``libs`` or ``services`` is imported.
"""

import os

os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"
os.environ["CRM_URL"] = "http://crm.test/api/crm"
os.environ["SITE_URL"] = "https://events.test"
os.environ["TIMEZONE"] = "America/Chicago"
