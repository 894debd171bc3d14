"""In-memory credential records keyed by service name."""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple
from pwvault.config.settings import FORBIDDEN_FIELD_CHARS

log = logging.getLogger(__name__)

class RecordError(Exception): ...

@dataclass
class CredentialRecord:
	service: str
	username: str
	password: str

	def __repr__(self) -> str:
		return f"CredentialRecord(service={self.service!r}, username={self.username!r}, password='***')"

def check_field(name: str, value: str) -> None:
	bad = [c for c in FORBIDDEN_FIELD_CHARS if c in value]
	if bad:
		raise RecordError(f'{name} must not contain {bad[0]!r}')

class RecordStore:
	"""Mapping of service -> CredentialRecord. Last write wins."""

	def __init__(self):
		self._records: Dict[str, CredentialRecord] = {}

	def __len__(self) -> int:
		return len(self._records)

	def __contains__(self, service: object) -> bool:
		return service in self._records

	def __iter__(self) -> Iterator[CredentialRecord]:
		return iter(list(self._records.values()))

	def upsert(self, service: str, username: str, password: str) -> CredentialRecord:
		"""Insert or replace the record for `service`.

		Service and username end up as raw fields in the vault file, so the
		delimiter and line breaks are refused here.
		"""
		if not service:
			raise RecordError('Service name must not be empty')
		check_field('Service', service)
		check_field('Username', username)
		if service in self._records:
			log.debug('Overwriting record for %s', service)
		record = CredentialRecord(service, username, password)
		self._records[service] = record
		return record

	def get(self, service: str) -> Optional[CredentialRecord]:
		record = self._records.get(service)
		if record is None:
			return None
		return CredentialRecord(record.service, record.username, record.password)

	def delete(self, service: str) -> bool:
		return self._records.pop(service, None) is not None

	def list(self) -> List[Tuple[str, str]]:
		return [(r.service, r.username) for r in self._records.values()]
