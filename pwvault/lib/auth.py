"""Master passphrase gate: persist, load and check the master digest."""
from __future__ import annotations
import hmac, logging
from pathlib import Path
from typing import Optional
import bcrypt
from pwvault.config.settings import DEFAULT_HASHER, HASHERS, master_path
from .crypto import digest as sha256_digest

log = logging.getLogger(__name__)

BCRYPT_PREFIX = '$2'

class AuthError(Exception):
	pass

def hash_passphrase(passphrase: str, scheme: str = DEFAULT_HASHER) -> str:
	if not passphrase:
		raise AuthError('Empty passphrase')
	if scheme == 'sha256':
		return sha256_digest(passphrase)
	if scheme == 'bcrypt':
		return bcrypt.hashpw(passphrase.encode(), bcrypt.gensalt()).decode()
	raise AuthError(f'Unknown hasher: {scheme} (expected one of {", ".join(HASHERS)})')

def check_passphrase(passphrase: str, stored: str) -> bool:
	if stored.startswith(BCRYPT_PREFIX):
		try:
			return bcrypt.checkpw(passphrase.encode(), stored.encode())
		except ValueError:
			return False
	return hmac.compare_digest(sha256_digest(passphrase).encode(), stored.encode('utf-8', errors='replace'))

class MasterGate:
	"""Holds the master digest; unset until `load` finds one or `setup` runs."""

	def __init__(self, path: Path | None = None):
		self.path = Path(path) if path is not None else master_path()
		self.digest: Optional[str] = None

	@property
	def is_set(self) -> bool:
		return self.digest is not None

	def load(self) -> Optional[str]:
		"""Read the persisted digest; None means first run."""
		try:
			with self.path.open('r', encoding='utf-8') as fh:
				line = fh.readline().strip()
		except FileNotFoundError:
			log.debug('No master digest at %s', self.path)
			return None
		except (OSError, UnicodeDecodeError) as e:
			log.warning('Master digest at %s unreadable: %s', self.path, e)
			return None
		if not line:
			return None
		self.digest = line
		return line

	def setup(self, passphrase: str, scheme: str = DEFAULT_HASHER) -> str:
		value = hash_passphrase(passphrase, scheme)
		if self.path.exists():
			log.warning('Overwriting master digest at %s', self.path)
		try:
			self.path.parent.mkdir(parents=True, exist_ok=True)
			self.path.write_text(value + '\n', encoding='utf-8')
		except OSError as e:
			raise AuthError(f'Could not write master digest: {e}') from e
		self.digest = value
		log.info('Master digest written (%s)', scheme)
		return value

	def verify(self, passphrase: str, digest: str | None = None) -> bool:
		stored = digest if digest is not None else self.digest
		if stored is None:
			return False
		ok = check_passphrase(passphrase, stored)
		if not ok:
			log.info('Master passphrase rejected')
		return ok
