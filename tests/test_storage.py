import pytest
from pathlib import Path
from pwvault.lib.crypto import InvalidKeyError, SealedTransform, XorTransform
from pwvault.lib.records import RecordStore
from pwvault.lib.storage import StorageError, VaultFile

def make_vault(tmp_path: Path):
    return VaultFile(tmp_path / 'passwords.dat')

def test_save_and_load_roundtrip(tmp_path: Path):
    vf = make_vault(tmp_path)
    st = RecordStore(); st.upsert('github', 'alice', 'Secr3t!')
    assert vf.save(st, b'masterpw') == 1
    res = vf.load(b'masterpw')
    assert res.skipped == 0
    rec = res.store.get('github')
    assert (rec.service, rec.username, rec.password) == ('github', 'alice', 'Secr3t!')

def test_file_format(tmp_path: Path):
    vf = make_vault(tmp_path)
    st = RecordStore(); st.upsert('github', 'alice', 'Secr3t!')
    vf.save(st, b'masterpw')
    line, = vf.path.read_text().splitlines()
    service, username, encoded = line.split('|')
    assert (service, username) == ('github', 'alice')
    assert encoded == XorTransform().encode(b'Secr3t!', b'masterpw')
    assert 'Secr3t!' not in line

def test_load_missing_file(tmp_path: Path):
    res = make_vault(tmp_path).load(b'k')
    assert len(res.store) == 0 and res.skipped == 0

def test_load_directory_is_unreadable(tmp_path: Path):
    res = VaultFile(tmp_path).load(b'k')
    assert len(res.store) == 0

def test_malformed_lines_skipped(tmp_path: Path):
    vf = make_vault(tmp_path)
    good = XorTransform().encode(b'pw', b'k')
    vf.path.write_text(f'onlytwo|fields\n\ngithub|alice|{good}\nbad|hex|zz\na|b|c|d\n|nosvc|{good}\n')
    res = vf.load(b'k')
    assert res.store.list() == [('github', 'alice')]
    assert res.store.get('github').password == 'pw'
    assert res.skipped == 4

def test_save_overwrites_in_full(tmp_path: Path):
    vf = make_vault(tmp_path)
    st = RecordStore(); st.upsert('a', 'u', 'p'); st.upsert('b', 'u', 'p')
    vf.save(st, b'k')
    st.delete('a')
    vf.save(st, b'k')
    assert len(vf.path.read_text().splitlines()) == 1
    assert not (tmp_path / 'passwords.dat.tmp').exists()

def test_wrong_key_garbles_but_loads(tmp_path: Path):
    vf = make_vault(tmp_path)
    st = RecordStore(); st.upsert('svc', 'u', 'Secr3t!')
    vf.save(st, b'right')
    res = vf.load(b'wrong')
    assert res.store.get('svc').password != 'Secr3t!'

def test_sealed_records_mix_with_plain(tmp_path: Path):
    vf = make_vault(tmp_path)
    st = RecordStore(); st.upsert('svc', 'u', 'one')
    vf.save(st, b'k', SealedTransform(iterations=1000))
    with vf.path.open('a') as fh:
        fh.write(f"other|v|{XorTransform().encode(b'two', b'k')}\n")
    lines = vf.path.read_text().splitlines()
    assert lines[0].split('|')[2].startswith('gcm:1000:')
    res = vf.load(b'k')
    assert res.skipped == 0
    assert res.store.get('svc').password == 'one'
    assert res.store.get('other').password == 'two'

def test_sealed_roundtrip_default_iterations(tmp_path: Path):
    vf = make_vault(tmp_path)
    st = RecordStore(); st.upsert('svc', 'u', 'Secr3t!')
    vf.save(st, b'k', SealedTransform())
    assert vf.load(b'k').store.get('svc').password == 'Secr3t!'

def test_empty_key_fails_fast(tmp_path: Path):
    vf = make_vault(tmp_path)
    with pytest.raises(InvalidKeyError):
        vf.save(RecordStore(), b'')
    with pytest.raises(InvalidKeyError):
        vf.load(b'')

def test_save_failure_surfaces(tmp_path: Path):
    blocker = tmp_path / 'file'
    blocker.write_text('x')
    vf = VaultFile(blocker / 'passwords.dat')
    st = RecordStore(); st.upsert('a', 'u', 'p')
    with pytest.raises(StorageError):
        vf.save(st, b'k')

def test_env_override(monkeypatch, tmp_path: Path):
    monkeypatch.setenv('VAULT_PATH', str(tmp_path / 'env.dat'))
    assert VaultFile().path == tmp_path / 'env.dat'
