import json

import pytest

from allersafe.services.profile_service import LocalProfileStore


@pytest.fixture
def patients_file(tmp_path):
    path = tmp_path / "patients.json"
    path.write_text(json.dumps([
        {"id": "p1", "name": "Alex", "birthdate": "1990-01-01", "symptoms": "nuts, milk"},
        {"id": "p2", "name": "Sam", "symptoms": ""},
        {"name": "No Id"},
    ]))
    return path


def test_profiles_loaded(patients_file):
    store = LocalProfileStore(str(patients_file))
    assert store.get_profile("p1").name == "Alex"
    assert store.get_allergies("p1") == ["nuts", "milk"]
    assert store.get_allergies("p2") == []


def test_malformed_records_are_skipped(patients_file):
    store = LocalProfileStore(str(patients_file))
    assert set(store.profiles) == {"p1", "p2"}


def test_unknown_user_has_no_allergies(patients_file):
    store = LocalProfileStore(str(patients_file))
    assert store.get_profile("nobody") is None
    assert store.get_allergies("nobody") == []
    assert store.get_allergies(None) == []


def test_missing_file(tmp_path):
    store = LocalProfileStore(str(tmp_path / "missing.json"))
    assert store.profiles == {}


def test_invalid_json(tmp_path):
    path = tmp_path / "patients.json"
    path.write_text("{not json")
    assert LocalProfileStore(str(path)).profiles == {}
