"""Vault file: one `service|username|encoded-password` line per record.

Only the password field is transformed. There is no header or checksum; the
file is rewritten in full on every save.
"""
from __future__ import annotations
import logging, os
from dataclasses import dataclass
from pathlib import Path
from pwvault.config.settings import FIELD_DELIMITER, vault_path
from .crypto import BytesLike, CryptoError, InvalidKeyError, XorTransform, decode_field
from .records import RecordError, RecordStore

log = logging.getLogger(__name__)

class StorageError(Exception): ...

@dataclass
class LoadResult:
	store: RecordStore
	skipped: int = 0

class VaultFile:
	def __init__(self, path: Path | None = None, delimiter: str = FIELD_DELIMITER):
		# Resolve path dynamically to honor environment overrides in tests
		self.path = Path(path) if path is not None else vault_path()
		self.delimiter = delimiter

	def exists(self) -> bool:
		return self.path.exists()

	@staticmethod
	def _check_key(key: BytesLike) -> None:
		if not key:
			raise InvalidKeyError('Vault key must not be empty')

	def encode_line(self, record, key: BytesLike, transform) -> str:
		return self.delimiter.join((record.service, record.username, transform.encode(record.password, key)))

	def save(self, store: RecordStore, key: BytesLike, transform=None) -> int:
		"""Overwrite the vault with every record in `store`; returns the line count.

		Raises StorageError if the file cannot be written. The previous file is
		left intact in that case.
		"""
		self._check_key(key)
		transform = transform or XorTransform()
		lines = [self.encode_line(r, key, transform) for r in store]
		tmp = self.path.with_name(self.path.name + '.tmp')
		try:
			self.path.parent.mkdir(parents=True, exist_ok=True)
			with tmp.open('w', encoding='utf-8', newline='\n') as fh:
				for line in lines:
					fh.write(line + '\n')
			os.replace(tmp, self.path)
		except OSError as e:
			if tmp.exists():
				tmp.unlink()
			raise StorageError(f'Could not write vault {self.path}: {e}') from e
		log.info('Saved %d record(s) to %s', len(lines), self.path)
		return len(lines)

	def parse_line(self, line: str, key: BytesLike, store: RecordStore) -> bool:
		parts = line.split(self.delimiter)
		if len(parts) != 3:
			return False
		service, username, encoded = parts
		try:
			password = decode_field(encoded, key).decode('utf-8', errors='replace')
			store.upsert(service, username, password)
		except (CryptoError, RecordError) as e:
			log.debug('Rejected line for %r: %s', service, e)
			return False
		return True

	def load(self, key: BytesLike) -> LoadResult:
		"""Read the vault into a fresh store.

		A missing or unreadable file yields an empty store. Lines that do not
		parse are counted in `skipped` rather than raised; blank lines are
		ignored.
		"""
		self._check_key(key)
		result = LoadResult(RecordStore())
		try:
			with self.path.open('r', encoding='utf-8', errors='replace') as fh:
				for lineno, raw in enumerate(fh, 1):
					line = raw.rstrip('\r\n')
					if not line:
						continue
					if not self.parse_line(line, key, result.store):
						log.warning('Skipping malformed vault line %d in %s', lineno, self.path)
						result.skipped += 1
		except FileNotFoundError:
			log.debug('No vault at %s; starting empty', self.path)
			return LoadResult(RecordStore())
		except OSError as e:
			log.warning('Vault %s unreadable (%s); starting empty', self.path, e)
			return LoadResult(RecordStore())
		log.info('Loaded %d record(s) from %s (%d skipped)', len(result.store), self.path, result.skipped)
		return result
