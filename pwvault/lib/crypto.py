"""Cryptographic helpers: master digest, password transforms, generator.

XorTransform is the vault's native field encoding. It is a repeating-key XOR
and offers obscurity only: no integrity, no per-record randomness. Use
SealedTransform (AES-GCM) when that matters; its fields carry a `gcm:` prefix
so both forms can share one vault file.
"""
from __future__ import annotations
import hashlib, secrets, string
from typing import Dict, Union
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from pwvault.config.settings import (
	DEFAULT_ITERATIONS, SALT_LENGTH, KEY_LENGTH, NONCE_LENGTH, AUTH_TAG_LENGTH,
	SEALED_PREFIX, PASSWORD_ALPHABET, DEFAULT_PASSWORD_LENGTH
)

BytesLike = Union[bytes, str]

class CryptoError(Exception):
	pass

class InvalidKeyError(CryptoError):
	pass

def _as_bytes(value: BytesLike) -> bytes:
	return value.encode('utf-8') if isinstance(value, str) else bytes(value)

def _require_key(key: BytesLike) -> bytes:
	key = _as_bytes(key)
	if not key:
		raise InvalidKeyError('Transform key must not be empty')
	return key

def digest(passphrase: BytesLike) -> str:
	"""Unsalted SHA-256 of the passphrase as 64 lowercase hex chars."""
	return hashlib.sha256(_as_bytes(passphrase)).hexdigest()

def _xor(data: bytes, key: bytes) -> bytes:
	return bytes(b ^ key[i % len(key)] for i, b in enumerate(data))

class XorTransform:
	name = 'xor'

	def encode(self, plaintext: BytesLike, key: BytesLike) -> str:
		key = _require_key(key)
		return _xor(_as_bytes(plaintext), key).hex()

	def decode(self, encoded: str, key: BytesLike) -> bytes:
		"""Reverse `encode`. Malformed hex fails the whole field."""
		key = _require_key(key)
		if len(encoded) % 2:
			raise CryptoError('Odd-length hex field')
		if any(c not in string.hexdigits for c in encoded):
			raise CryptoError('Non-hex character in field')
		return _xor(bytes.fromhex(encoded), key)

class SealedTransform:
	"""AES-256-GCM with a PBKDF2 key derived per field from a random salt.

	Fields read `gcm:<iterations>:<hex(salt|nonce|ct|tag)>`, so any reader can
	rebuild the key whatever count the writer used.
	"""
	name = 'gcm'

	def __init__(self, iterations: int = DEFAULT_ITERATIONS):
		if iterations < 1:
			raise CryptoError('Iterations must be positive')
		self.iterations = iterations

	def derive_key(self, key: BytesLike, salt: bytes, iterations: int | None = None) -> bytes:
		kdf = PBKDF2HMAC(algorithm=hashes.SHA256(), length=KEY_LENGTH, salt=salt, iterations=iterations or self.iterations)
		return kdf.derive(_require_key(key))

	def encode(self, plaintext: BytesLike, key: BytesLike) -> str:
		salt = secrets.token_bytes(SALT_LENGTH)
		nonce = secrets.token_bytes(NONCE_LENGTH)
		enc = Cipher(algorithms.AES(self.derive_key(key, salt)), modes.GCM(nonce)).encryptor()
		ct = enc.update(_as_bytes(plaintext)) + enc.finalize()
		return f'{SEALED_PREFIX}{self.iterations}:{(salt + nonce + ct + enc.tag).hex()}'

	def decode(self, encoded: str, key: BytesLike) -> bytes:
		if not encoded.startswith(SEALED_PREFIX):
			raise CryptoError('Not a sealed field')
		count, sep, body = encoded[len(SEALED_PREFIX):].partition(':')
		if not sep or not (count.isascii() and count.isdigit()) or int(count) < 1:
			raise CryptoError('Sealed field has no iteration count')
		try:
			blob = bytes.fromhex(body)
		except ValueError as e:
			raise CryptoError(f'Bad sealed field: {e}') from e
		if len(blob) < SALT_LENGTH + NONCE_LENGTH + AUTH_TAG_LENGTH:
			raise CryptoError('Sealed field too short')
		salt = blob[:SALT_LENGTH]
		nonce = blob[SALT_LENGTH:SALT_LENGTH + NONCE_LENGTH]
		ct = blob[SALT_LENGTH + NONCE_LENGTH:-AUTH_TAG_LENGTH]; tag = blob[-AUTH_TAG_LENGTH:]
		dec = Cipher(algorithms.AES(self.derive_key(key, salt, int(count))), modes.GCM(nonce, tag)).decryptor()
		try:
			return dec.update(ct) + dec.finalize()
		except InvalidTag as e:
			raise CryptoError('Decrypt failed: wrong key or tampered field') from e

TRANSFORMS: Dict[str, type] = {XorTransform.name: XorTransform, SealedTransform.name: SealedTransform}

def transform_for(name: str):
	try:
		return TRANSFORMS[name]()
	except KeyError:
		raise CryptoError(f'Unknown cipher: {name}') from None

def decode_field(encoded: str, key: BytesLike) -> bytes:
	"""Decode a stored password field, picking the transform from its form."""
	if encoded.startswith(SEALED_PREFIX):
		return SealedTransform().decode(encoded, key)
	return XorTransform().decode(encoded, key)

def generate_password(length: int = DEFAULT_PASSWORD_LENGTH, alphabet: str = PASSWORD_ALPHABET) -> str:
	if length < 0:
		raise ValueError('Length must not be negative')
	return ''.join(secrets.choice(alphabet) for _ in range(length))
