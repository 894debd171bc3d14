"""Session: one unlocked vault, its key and its in-memory records."""
from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Optional, Tuple
from pwvault.config.settings import DEFAULT_CIPHER, DEFAULT_HASHER, DEFAULT_PASSWORD_LENGTH
from .auth import MasterGate
from .crypto import generate_password, transform_for
from .records import CredentialRecord, RecordStore
from .storage import VaultFile

log = logging.getLogger(__name__)

class SessionError(Exception): ...

class Session:
	def __init__(self, vault_path: Path | None = None, master_path: Path | None = None, cipher: str = DEFAULT_CIPHER):
		self.gate = MasterGate(master_path)
		self.vault = VaultFile(vault_path)
		self.transform = transform_for(cipher)
		self.store = RecordStore()
		self.key: Optional[bytes] = None
		self.first_run = False
		self.skipped = 0

	@property
	def is_open(self) -> bool:
		return self.key is not None

	def open(self, passphrase: str, hasher: str = DEFAULT_HASHER) -> bool:
		"""Unlock with `passphrase`; False means the passphrase was rejected.

		With no stored digest this is first-run setup: the digest is written
		and the session starts with an empty store.
		"""
		if self.gate.load() is None:
			self.gate.setup(passphrase, hasher)
			self.first_run = True
			if self.vault.exists():
				log.warning('New master passphrase set while %s exists; it will be overwritten on save', self.vault.path)
			self.key = passphrase.encode()
			return True
		if not self.gate.verify(passphrase):
			return False
		self.key = passphrase.encode()
		result = self.vault.load(self.key)
		self.store, self.skipped = result.store, result.skipped
		return True

	def _require_open(self) -> bytes:
		if self.key is None:
			raise SessionError('Session is locked')
		return self.key

	def add(self, service: str, username: str, password: str) -> CredentialRecord:
		self._require_open()
		return self.store.upsert(service, username, password)

	def get(self, service: str) -> Optional[CredentialRecord]:
		self._require_open()
		return self.store.get(service)

	def delete(self, service: str) -> bool:
		self._require_open()
		return self.store.delete(service)

	def list(self) -> List[Tuple[str, str]]:
		self._require_open()
		return self.store.list()

	@staticmethod
	def generate(length: int = DEFAULT_PASSWORD_LENGTH) -> str:
		return generate_password(length)

	def save(self) -> int:
		return self.vault.save(self.store, self._require_open(), self.transform)
