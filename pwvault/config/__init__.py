"""Configuration package for pwvault.

Everything lives in `settings`; this module re-exports it so callers can
write `from pwvault.config import FIELD_DELIMITER`.
"""

from .settings import *  # noqa: F401,F403
from .settings import __all__  # noqa: F401
