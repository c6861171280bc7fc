import os

# Tests run against the in-process store and never reach the real gateway
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("CASHFREE_APP_ID", "test-app")
os.environ.setdefault("CASHFREE_SECRET_KEY", "test-secret")
os.environ.setdefault("CASHFREE_BASE_URL", "https://sandbox.cashfree.com/pg")
