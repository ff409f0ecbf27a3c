import pytest

from procflow.fakes.validator import FakeValidator
from procflow.model import Param, ProcessDefinition
from procflow.validator import ValidationError


@pytest.fixture
def validator():
    return FakeValidator()


def test_validate_passes_by_default(validator):
    proc = ProcessDefinition(name="sample")
    assert validator.validate(proc) is None
    assert validator.validate.call_count() == 1
    assert validator.validate.args_for_call(0) == (proc,)


def test_validate_raises_configured_error(validator):
    validator.validate.raises(ValidationError("validation error"))
    with pytest.raises(ValidationError, match="validation error"):
        validator.validate(ProcessDefinition(name="sample"))


def test_validate_raises_only_on_given_call(validator):
    validator.validate.raises_on_call(1, ValidationError("validation error"))
    proc = ProcessDefinition(name="sample")
    assert validator.validate(proc) is None
    with pytest.raises(ValidationError):
        validator.validate(proc)
    assert validator.validate(proc) is None
    assert validator.validate.call_count() == 3


def test_validate_mandatory_params_records_arguments(validator):
    proc = ProcessDefinition(name="ssh-process", params=[Param(name="host", mandatory=True)])
    params = {"host": "example.com"}
    assert validator.validate_mandatory_params(proc, params) is None
    assert validator.validate_mandatory_params.args_for_call(0) == (proc, params)


def test_validate_mandatory_params_error(validator):
    validator.validate_mandatory_params.raises(
        ValidationError("missing mandatory parameters: password")
    )
    with pytest.raises(ValidationError, match="missing mandatory parameters: password"):
        validator.validate_mandatory_params(ProcessDefinition(), {})


def test_invocations_grouped(validator):
    proc = ProcessDefinition(name="sample")
    validator.validate_mandatory_params(proc, None)
    validator.validate(proc)
    calls = validator.invocations()
    assert calls == {
        "validate_mandatory_params": [(proc, None)],
        "validate": [(proc,)],
    }