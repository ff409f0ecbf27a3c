import pytest

from procflow.fakes.producer_reader import FakeHandlerReader
from procflow.model import ProcessDefinition, Task


@pytest.fixture
def reader():
    return FakeHandlerReader()


def test_parse_config_file_default_is_empty_definition(reader):
    assert reader.parse_config_file("dir/sample.yaml") == ProcessDefinition()
    assert reader.parse_config_file.call_count() == 1
    assert reader.parse_config_file.args_for_call(0) == ("dir/sample.yaml",)


def test_parse_config_file_returns_configured_definition(reader):
    process = ProcessDefinition(
        name="sample",
        tasks=[Task(name="print", class_="localCmd", parameters={"cmd": "echo Hello"})],
    )
    reader.parse_config_file.returns(process)
    assert reader.parse_config_file("dir/sample.yaml") == process


def test_parse_config_file_raises_configured_error(reader):
    reader.parse_config_file.raises(ValueError("parse error"))
    with pytest.raises(ValueError, match="parse error"):
        reader.parse_config_file("dir/sample.yaml")
    assert reader.parse_config_file.call_count() == 1


def test_apply_templating_returns_configured_tasks(reader):
    tasks = [Task(name="print", class_="localCmd", parameters={"cmd": "echo Hello"})]
    reader.apply_templating_to_tasks.returns(tasks)
    result = reader.apply_templating_to_tasks(tasks, {"msg": "hi"})
    assert result == tasks
    assert reader.apply_templating_to_tasks.args_for_call(0) == (tasks, {"msg": "hi"})


def test_apply_templating_records_copy_of_task_list(reader):
    tasks = [Task(name="t1", class_="C")]
    reader.apply_templating_to_tasks(tasks, {})
    tasks.append(Task(name="t2", class_="C"))
    recorded_tasks, _ = reader.apply_templating_to_tasks.args_for_call(0)
    assert [t.name for t in recorded_tasks] == ["t1"]


def test_apply_templating_error(reader):
    reader.apply_templating_to_tasks.raises(RuntimeError("template error"))
    with pytest.raises(RuntimeError, match="template error"):
        reader.apply_templating_to_tasks([], {})


def test_get_process_name_on_call(reader):
    reader.get_process_name_from_file.returns("first")
    reader.get_process_name_from_file.returns_on_call(1, "second")
    assert reader.get_process_name_from_file("a.yaml") == "first"
    assert reader.get_process_name_from_file("b.yaml") == "second"
    assert reader.get_process_name_from_file("c.yaml") == "first"


def test_stub_routes_calls(reader):
    reader.get_process_name_from_file.calls(lambda path: path.upper())
    assert reader.get_process_name_from_file("x.yaml") == "X.YAML"


def test_invocations_grouped_by_method(reader):
    reader.parse_config_file("p.yaml")
    reader.get_process_name_from_file("n.yaml")
    reader.parse_config_file("q.yaml")
    calls = reader.invocations()
    assert calls["parse_config_file"] == [("p.yaml",), ("q.yaml",)]
    assert calls["get_process_name_from_file"] == [("n.yaml",)]
    assert "apply_templating_to_tasks" not in calls