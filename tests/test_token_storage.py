import json

from ehub.services.ehub_client import EhubApiClient
from ehub.storage.local_provider import LocalTokenStorage
from ehub.storage.memory_provider import MemoryTokenStorage
from ehub.storage.provider import AUTH_TOKEN_KEY


def test_local_storage_round_trip(tmp_path):
    path = tmp_path / "nested" / "auth.json"
    storage = LocalTokenStorage(str(path))

    assert storage.get(AUTH_TOKEN_KEY) is None
    storage.set(AUTH_TOKEN_KEY, "tok-1")
    assert json.loads(path.read_text()) == {AUTH_TOKEN_KEY: "tok-1"}
    assert LocalTokenStorage(str(path)).get(AUTH_TOKEN_KEY) == "tok-1"

    storage.remove(AUTH_TOKEN_KEY)
    assert storage.get(AUTH_TOKEN_KEY) is None


def test_local_storage_keeps_other_slots(tmp_path):
    storage = LocalTokenStorage(str(tmp_path / "auth.json"))
    storage.set("theme", "dark")
    storage.set(AUTH_TOKEN_KEY, "tok-1")
    storage.remove(AUTH_TOKEN_KEY)
    assert storage.get("theme") == "dark"


def test_corrupt_token_file_reads_as_no_token(tmp_path):
    path = tmp_path / "auth.json"
    path.write_text("{not json")
    client = EhubApiClient(base_url="https://ehub.test/api", token_storage=LocalTokenStorage(str(path)))
    assert client.token is None


def test_non_object_token_file_reads_as_empty(tmp_path):
    path = tmp_path / "auth.json"
    path.write_text('["tok"]')
    assert LocalTokenStorage(str(path)).get(AUTH_TOKEN_KEY) is None


def test_memory_storage_remove_missing_key_is_noop():
    storage = MemoryTokenStorage()
    storage.remove(AUTH_TOKEN_KEY)
    assert storage.get(AUTH_TOKEN_KEY) is None
