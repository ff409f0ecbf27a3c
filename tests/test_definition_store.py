import pytest

from procflow.fakes.definition_store import FakeProcessDefinitionStore
from procflow.store import DefinitionNotFoundError


def test_default_path_is_empty():
    fake = FakeProcessDefinitionStore()
    assert fake.get_process_path_by_name("sample") == ""
    assert fake.get_process_path_by_name.call_count() == 1


def test_returns_configured_path_and_records_name():
    fake = FakeProcessDefinitionStore()
    fake.get_process_path_by_name.returns("dir/sample.yaml")
    assert fake.get_process_path_by_name("sample") == "dir/sample.yaml"
    assert fake.get_process_path_by_name.args_for_call(0) == ("sample",)


def test_raises_configured_error():
    fake = FakeProcessDefinitionStore()
    fake.get_process_path_by_name.raises(DefinitionNotFoundError("not found"))
    with pytest.raises(DefinitionNotFoundError, match="not found"):
        fake.get_process_path_by_name("missing")


def test_returns_on_call_overrides_default():
    fake = FakeProcessDefinitionStore()
    fake.get_process_path_by_name.returns("a.yaml")
    fake.get_process_path_by_name.returns_on_call(1, "b.yaml")
    results = [fake.get_process_path_by_name(n) for n in ("x", "y", "z")]
    assert results == ["a.yaml", "b.yaml", "a.yaml"]


def test_stub_receives_arguments():
    fake = FakeProcessDefinitionStore()
    fake.get_process_path_by_name.calls(lambda name: f"defs/{name}.yaml")
    assert fake.get_process_path_by_name("deploy") == "defs/deploy.yaml"


def test_invocations_lists_every_lookup():
    fake = FakeProcessDefinitionStore()
    fake.get_process_path_by_name("one")
    fake.get_process_path_by_name("two")
    assert fake.invocations() == {"get_process_path_by_name": [("one",), ("two",)]}