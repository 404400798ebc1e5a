from datetime import timedelta

SDK_VERSION = "1.0.0"
API_VERSION = "2024-02-02-preview"
USER_AGENT = f"codesessions-sdk-python/{SDK_VERSION} (Language=python)"

ENDPOINT_ENV = "CODESESSIONS_ENDPOINT"
SANITIZE_INPUT_ENV = "CODESESSIONS_SANITIZE_INPUT"
TIMEOUT_SECONDS_ENV = "CODESESSIONS_TIMEOUT_SECONDS"
TOKEN_FILE_ENV = "CODESESSIONS_TOKEN_FILE"
DEFAULT_TOKEN_PATH = "/var/run/secrets/kubernetes.io/serviceaccount/token"

DEFAULT_TIMEOUT_SECONDS = 100
DEFAULT_CONNECT_TIMEOUT = 10.0  # seconds
READ_TIMEOUT_BUFFER = 2.0  # seconds on top of the remote execution timeout
DEFAULT_MAX_CONNECTIONS = 10

# Tokens expiring within this margin are refreshed before use
TOKEN_REFRESH_MARGIN = timedelta(minutes=5)
# Lifetime assumed for tokens that carry no exp claim
DEFAULT_TOKEN_LIFETIME = timedelta(hours=1)
