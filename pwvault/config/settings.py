"""Project configuration settings.

Plain constants only; file locations honour VAULT_PATH / VAULT_MASTER_PATH
when resolved through the helpers below.
"""

from pathlib import Path
import os

# Files
DEFAULT_VAULT_PATH = Path("passwords.dat")
DEFAULT_MASTER_PATH = Path("master.hash")

# Record format
FIELD_DELIMITER = "|"
FORBIDDEN_FIELD_CHARS = (FIELD_DELIMITER, "\n", "\r")

# Master digest schemes
DEFAULT_HASHER = "sha256"
HASHERS = ("sha256", "bcrypt")

# Password transforms
DEFAULT_CIPHER = "xor"
CIPHERS = ("xor", "gcm")
SEALED_PREFIX = "gcm:"
DEFAULT_ITERATIONS = 100_000
SALT_LENGTH = 16
KEY_LENGTH = 32  # AES-256
NONCE_LENGTH = 12  # GCM nonce
AUTH_TAG_LENGTH = 16  # GCM tag length

# Generator
PASSWORD_ALPHABET = (
	"ABCDEFGHIJKLMNOPQRSTUVWXYZ"
	"abcdefghijklmnopqrstuvwxyz"
	"0123456789"
	"!@#$%^&*"
)
DEFAULT_PASSWORD_LENGTH = 16

# Logging
LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

def vault_path() -> Path:
	env_path = os.environ.get("VAULT_PATH")
	return Path(env_path) if env_path else DEFAULT_VAULT_PATH

def master_path() -> Path:
	env_path = os.environ.get("VAULT_MASTER_PATH")
	return Path(env_path) if env_path else DEFAULT_MASTER_PATH

__all__ = [
	'DEFAULT_VAULT_PATH','DEFAULT_MASTER_PATH','FIELD_DELIMITER','FORBIDDEN_FIELD_CHARS',
	'DEFAULT_HASHER','HASHERS','DEFAULT_CIPHER','CIPHERS','SEALED_PREFIX',
	'DEFAULT_ITERATIONS','SALT_LENGTH','KEY_LENGTH','NONCE_LENGTH','AUTH_TAG_LENGTH',
	'PASSWORD_ALPHABET','DEFAULT_PASSWORD_LENGTH','LOG_LEVEL','LOG_FORMAT',
	'vault_path','master_path'
]
