import pytest
from pwvault.config import PASSWORD_ALPHABET
from pwvault.lib.crypto import (
    CryptoError, InvalidKeyError, SealedTransform, XorTransform,
    decode_field, digest, generate_password, transform_for
)

def test_digest_deterministic_and_fixed_length():
    assert digest(b'hunter2') == digest(b'hunter2')
    assert len(digest(b'')) == len(digest(b'x' * 10_000)) == 64

def test_digest_sensitive():
    assert digest(b'masterpw') != digest(b'masterpw ')
    assert digest('masterpw') == digest(b'masterpw')

def test_digest_known_value():
    assert digest(b'abc') == 'ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad'

@pytest.mark.parametrize('payload,key', [
    (b'', b'k'),
    (b'Secr3t!', b'masterpw'),
    (b'a much longer password than the key', b'ab'),
    (bytes(range(256)), b'\x00\xff'),
    ('pässwörd'.encode(), 'ключ'.encode()),
])
def test_xor_roundtrip(payload, key):
    x = XorTransform()
    assert x.decode(x.encode(payload, key), key) == payload

def test_xor_encoding_shape():
    out = XorTransform().encode(b'AB', b'\x01')
    assert out == '4043'

def test_xor_empty_key():
    x = XorTransform()
    with pytest.raises(InvalidKeyError):
        x.encode(b'data', b'')
    with pytest.raises(InvalidKeyError):
        x.decode('00', b'')

@pytest.mark.parametrize('bad', ['abc', 'zz', '0g', 'ab cd'])
def test_xor_malformed_hex(bad):
    with pytest.raises(CryptoError):
        XorTransform().decode(bad, b'key')

def test_sealed_roundtrip_and_randomness():
    s = SealedTransform(iterations=1000)
    a = s.encode(b'Secr3t!', b'masterpw'); b = s.encode(b'Secr3t!', b'masterpw')
    assert a.startswith('gcm:') and a != b
    assert s.decode(a, b'masterpw') == b'Secr3t!'

def test_sealed_wrong_key_and_tamper():
    s = SealedTransform(iterations=1000)
    blob = s.encode(b'data', b'right')
    with pytest.raises(CryptoError):
        s.decode(blob, b'wrong')
    flipped = blob[:-2] + ('00' if blob[-2:] != '00' else '11')
    with pytest.raises(CryptoError):
        s.decode(flipped, b'right')
    with pytest.raises(CryptoError):
        s.decode('gcm:1000:abcd', b'right')

def test_decode_field_dispatch():
    key = b'masterpw'
    assert decode_field(XorTransform().encode(b'pw', key), key) == b'pw'
    assert decode_field(SealedTransform().encode(b'pw', key), key) == b'pw'

def test_transform_for():
    assert isinstance(transform_for('xor'), XorTransform)
    assert isinstance(transform_for('gcm'), SealedTransform)
    with pytest.raises(CryptoError):
        transform_for('rot13')

def test_generate_password_shape():
    pw = generate_password(16)
    assert len(pw) == 16
    assert all(c in PASSWORD_ALPHABET for c in pw)
    assert generate_password(0) == ''
    with pytest.raises(ValueError):
        generate_password(-1)

def test_sealed_field_carries_iterations():
    blob = SealedTransform(iterations=1500).encode(b'pw', b'k')
    assert blob.startswith('gcm:1500:')
    assert decode_field(blob, b'k') == b'pw'
    assert SealedTransform().decode(blob, b'k') == b'pw'

@pytest.mark.parametrize('bad', ['gcm:abcd', 'gcm::abcd', 'gcm:0:abcd', 'gcm:x1:abcd', 'gcm:²:abcd'])
def test_sealed_field_bad_iterations(bad):
    with pytest.raises(CryptoError):
        SealedTransform().decode(bad, b'k')

def test_sealed_rejects_nonpositive_iterations():
    with pytest.raises(CryptoError):
        SealedTransform(iterations=0)
