import pytest

from conversations import INTENTS
from engine.errors import FlowDefinitionError, FlowNotFoundError
from engine.flow_definition import FlowDefinition, FlowRegistry
from models.results import End


def finish(values, last_input):
    return End()


def test_register_and_get():
    registry = FlowRegistry()
    definition = registry.register(FlowDefinition.of("done", [finish]))

    assert registry.get("done") is definition
    assert "done" in registry
    assert registry.names == ("done",)


def test_duplicate_name_is_rejected():
    registry = FlowRegistry()
    registry.register(FlowDefinition.of("done", [finish]))

    with pytest.raises(FlowDefinitionError):
        registry.register(FlowDefinition.of("done", [finish]))


def test_flow_without_steps_is_rejected():
    with pytest.raises(FlowDefinitionError):
        FlowRegistry().register(FlowDefinition.of("empty", []))


def test_unknown_flow_lookup():
    with pytest.raises(FlowNotFoundError) as exc:
        FlowRegistry().get("ghost")
    assert exc.value.flow_name == "ghost"


def test_validate_reports_unregistered_calls():
    registry = FlowRegistry()
    registry.register(FlowDefinition.of("caller", [finish], calls=["ghost"]))

    with pytest.raises(FlowNotFoundError):
        registry.validate()


def test_definitions_are_immutable():
    definition = FlowDefinition.of("done", [finish])

    with pytest.raises(AttributeError):
        definition.name = "other"
    assert isinstance(definition.steps, tuple)


def test_bot_registry_covers_every_intent(registry):
    for flow in INTENTS.values():
        assert flow in registry
