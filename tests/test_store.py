import pytest
from sqlalchemy import create_engine

from procflow.store import DefinitionNotFoundError, ProcessDefinitionStore, StoreError

NAME = "sample-process"
PATH = "/etc/config/sample.yaml"


@pytest.fixture
def engine(tmp_path):
    eng = create_engine(f"sqlite:///{tmp_path / 'processdb.sqlite'}")
    yield eng
    eng.dispose()


@pytest.fixture
def store(engine):
    s = ProcessDefinitionStore(engine)
    s.create_schema()
    return s


def test_store_keeps_engine(engine):
    assert ProcessDefinitionStore(engine).engine is engine


def test_save_then_get_returns_path(store):
    assert store.save_process_definition_meta(NAME, PATH) is None
    assert store.get_process_path_by_name(NAME) == PATH


def test_save_updates_path_on_conflict(store):
    store.save_process_definition_meta(NAME, PATH)
    new_path = "/new/location/updated.yaml"
    store.save_process_definition_meta(NAME, new_path)
    assert store.get_process_path_by_name(NAME) == new_path


def test_get_returns_correct_path_among_several(store):
    store.save_process_definition_meta(NAME, PATH)
    store.save_process_definition_meta("other-process", "/etc/config/other.yaml")
    assert store.get_process_path_by_name(NAME) == PATH
    assert store.get_process_path_by_name("other-process") == "/etc/config/other.yaml"


def test_get_unknown_name_raises_not_found(store):
    store.save_process_definition_meta(NAME, PATH)
    with pytest.raises(DefinitionNotFoundError) as exc_info:
        store.get_process_path_by_name("nonexistent")
    assert "not found" in str(exc_info.value)
    assert isinstance(exc_info.value, StoreError)


def test_create_schema_is_idempotent(store):
    store.save_process_definition_meta(NAME, PATH)
    store.create_schema()
    assert store.get_process_path_by_name(NAME) == PATH


def test_save_without_schema_raises(engine):
    s = ProcessDefinitionStore(engine)
    with pytest.raises(StoreError) as exc_info:
        s.save_process_definition_meta(NAME, PATH)
    assert "failed to insert process metadata" in str(exc_info.value)


def test_get_without_schema_raises(engine):
    s = ProcessDefinitionStore(engine)
    with pytest.raises(StoreError) as exc_info:
        s.get_process_path_by_name(NAME)
    assert f"failed to fetch path for process {NAME}" in str(exc_info.value)
    assert not isinstance(exc_info.value, DefinitionNotFoundError)