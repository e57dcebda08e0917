"""Default locations and environment variable names."""
from pathlib import Path

KEYRING_HOME = Path("~/.navigator-keyring")
DATA_FILE_NAME = "passwords.json"
KEY_FILE_NAME = "master.key"

DEFAULT_DATA_FILE = KEYRING_HOME / DATA_FILE_NAME
DEFAULT_KEY_FILE = KEYRING_HOME / KEY_FILE_NAME

ENV_DATA_FILE = "KEYRING_DATA_FILE"
ENV_KEY_FILE = "KEYRING_KEY_FILE"
ENV_CIPHER_BACKEND = "KEYRING_CIPHER_BACKEND"

# owner read/write only
FILE_MODE = 0o600
