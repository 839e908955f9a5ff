import pytest

from engine.errors import FlowDefinitionError, FlowExecutionError, FlowNotFoundError
from engine.flow_definition import FlowDefinition, FlowRegistry
from engine.flow_engine import FlowEngine
from localization import Key
from models.enums import InputKind
from models.models import ConversationRecord
from models.results import End, Prompt, Push, Repeat, Replace


def ask(text, expects=InputKind.TEXT, **kwargs):
    return lambda values, last_input: Prompt(text=text, expects=expects, **kwargs)


@pytest.fixture
def toy_registry() -> FlowRegistry:
    registry = FlowRegistry()
    registry.register(FlowDefinition.of("echo", [
        ask("say something"),
        lambda values, text: End(result=text, say=[f"you said {text}"]),
    ]))
    registry.register(FlowDefinition.of("parent", [
        lambda values, _: Push(flow="echo", values={"started": True}),
        lambda values, result: End(result=f"child returned {result}"),
    ], calls=["echo"]))
    registry.register(FlowDefinition.of("grandparent", [
        lambda values, _: Push(flow="parent"),
        lambda values, result: Prompt(text="anything else?", values={"child": result}),
    ], calls=["parent"]))
    registry.register(FlowDefinition.of("positive", [
        ask("how many?", InputKind.NUMBER),
        lambda values, n: Repeat(say=["must be positive"]) if n < 1 else End(result=n),
    ]))
    registry.register(FlowDefinition.of("restart", [
        ask("again?"),
        lambda values, text: Replace(flow="restart", seed={"count": values.get("count", 0) + 1}),
    ]))
    registry.register(FlowDefinition.of("short", [ask("only question")]))
    registry.register(FlowDefinition.of("spin", [lambda values, _: Replace(flow="spin")]))
    registry.register(FlowDefinition.of("eager_repeat", [lambda values, _: Repeat()]))
    registry.register(FlowDefinition.of("lost", [lambda values, _: Push(flow="nowhere")]))
    registry.register(FlowDefinition.of("seeded", [
        lambda values, _: Prompt(text=f"seed is {values.get('seed')}"),
    ]))
    return registry


@pytest.fixture
def toy_engine(toy_registry) -> FlowEngine:
    return FlowEngine(toy_registry, ConversationRecord(), max_steps=20)


class TestFlowEngine:

    def test_push_runs_until_prompt(self, toy_engine):
        toy_engine.push("echo")

        assert toy_engine.depth == 1
        frame = toy_engine.active_frame
        assert frame.flow == "echo"
        assert frame.step_index == 1
        assert frame.pending.text == "say something"
        assert [m.text for m in toy_engine.outbox] == ["say something"]

    def test_push_uses_seed_values(self, toy_engine):
        toy_engine.push("seeded", seed={"seed": 7})

        assert toy_engine.active_frame.values == {"seed": 7}
        assert toy_engine.outbox[-1].text == "seed is 7"

    def test_push_defaults_to_empty_values(self, toy_engine):
        toy_engine.push("seeded")

        assert toy_engine.active_frame.values == {}

    def test_resume_delivers_input_and_ends(self, toy_engine):
        toy_engine.push("echo")
        toy_engine.resume("hi there")

        assert toy_engine.depth == 0
        assert not toy_engine.is_active
        assert toy_engine.outbox[-1].text == "you said hi there"

    def test_end_passes_result_to_parent(self, toy_engine):
        toy_engine.push("grandparent")
        assert toy_engine.depth == 3

        toy_engine.resume("ping")

        assert toy_engine.depth == 1
        frame = toy_engine.active_frame
        assert frame.flow == "grandparent"
        assert frame.values["child"] == "child returned ping"

    def test_push_end_pairs_keep_stack_balanced(self, toy_engine):
        # restart swallows whatever a finished child returns and asks again
        toy_engine.push("restart")
        base_depth = toy_engine.depth

        for _ in range(3):
            toy_engine.push("echo")
            assert toy_engine.depth == base_depth + 1
            toy_engine.resume("x")
            assert toy_engine.depth == base_depth

        assert toy_engine.active_frame.flow == "restart"

    def test_push_advances_parent_before_child_runs(self, toy_engine):
        toy_engine.push("parent")

        parent = toy_engine.stack[0]
        assert parent.step_index == 1
        assert parent.pending is None
        assert parent.values == {"started": True}

    def test_replace_keeps_depth_and_resets_index(self, toy_engine):
        toy_engine.push("short")
        toy_engine.push("restart")
        depth = toy_engine.depth

        toy_engine.resume("yes")
        toy_engine.resume("yes")

        assert toy_engine.depth == depth
        frame = toy_engine.active_frame
        assert frame.flow == "restart"
        assert frame.step_index == 1
        assert frame.values == {"count": 2}

    def test_replace_from_outside_a_step(self, toy_engine):
        toy_engine.push("echo")
        toy_engine.replace("seeded", seed={"seed": "fresh"})

        assert toy_engine.depth == 1
        assert toy_engine.active_frame.flow == "seeded"
        assert toy_engine.active_frame.values == {"seed": "fresh"}

    def test_end_from_outside_a_step_resumes_parent(self, toy_engine):
        toy_engine.push("parent")
        toy_engine.end("early")

        assert toy_engine.depth == 0
        assert toy_engine.outbox[-1].text == "say something"

    def test_repeat_reissues_pending_prompt(self, toy_engine):
        toy_engine.push("positive")
        toy_engine.resume("0")

        frame = toy_engine.active_frame
        assert frame.step_index == 1
        assert frame.pending.text == "how many?"
        assert [m.text for m in toy_engine.outbox[-2:]] == ["must be positive", "how many?"]

        toy_engine.resume("3")
        assert toy_engine.depth == 0

    def test_unrecognized_input_is_reported_and_reasked(self, toy_engine):
        toy_engine.push("positive")
        toy_engine.resume("lots")

        assert toy_engine.depth == 1
        assert toy_engine.active_frame.step_index == 1
        assert [m.text for m in toy_engine.outbox[-2:]] == [Key.prompt.retry, "how many?"]

    def test_retry_text_overrides_default(self, toy_registry):
        toy_registry.register(FlowDefinition.of("custom_retry", [
            ask("number please", InputKind.NUMBER, retry_text="digits only"),
            lambda values, n: End(),
        ]))
        engine = FlowEngine(toy_registry, ConversationRecord())
        engine.push("custom_retry")
        engine.resume("no")

        assert engine.outbox[-2].text == "digits only"

    def test_running_past_last_step_ends_flow(self, toy_engine):
        toy_engine.push("short")
        toy_engine.resume("answer")

        assert toy_engine.depth == 0

    def test_cancel_all_clears_stack(self, toy_engine):
        toy_engine.push("grandparent")
        toy_engine.cancel_all()

        assert toy_engine.depth == 0
        assert toy_engine.active_frame is None

    def test_step_count_guard(self, toy_engine):
        with pytest.raises(FlowExecutionError):
            toy_engine.push("spin")

    def test_repeat_without_pending_prompt_is_a_definition_error(self, toy_engine):
        with pytest.raises(FlowDefinitionError):
            toy_engine.push("eager_repeat")

    def test_push_unknown_flow(self, toy_engine):
        with pytest.raises(FlowNotFoundError):
            toy_engine.push("missing")
        assert toy_engine.depth == 0

    def test_step_pushing_unknown_flow(self, toy_engine):
        with pytest.raises(FlowNotFoundError) as exc:
            toy_engine.push("lost")
        assert exc.value.flow_name == "nowhere"

    def test_resume_without_active_flow(self, toy_engine):
        with pytest.raises(FlowExecutionError):
            toy_engine.resume("hello")

    def test_resume_without_pending_prompt(self, toy_registry):
        record = ConversationRecord.model_validate({"flow_stack": [{"flow": "echo", "step_index": 1}]})
        engine = FlowEngine(toy_registry, record)

        with pytest.raises(FlowExecutionError):
            engine.resume("hello")

    def test_stack_survives_serialization(self, toy_registry, toy_engine):
        toy_engine.push("grandparent")
        stored = toy_engine.record.model_dump(mode="json")

        restored = FlowEngine(toy_registry, ConversationRecord.model_validate(stored))
        restored.resume("later")

        assert restored.depth == 1
        assert restored.active_frame.values["child"] == "child returned later"

    def test_steps_cannot_mutate_frame_values_directly(self, toy_registry):
        def sneaky(values, _):
            values["leaked"] = True
            return Prompt(text="ok")

        toy_registry.register(FlowDefinition.of("sneaky", [sneaky]))
        engine = FlowEngine(toy_registry, ConversationRecord())
        engine.push("sneaky", seed={"kept": 1})

        assert engine.active_frame.values == {"kept": 1}

    def test_conversation_and_profile_updates_are_collected(self, toy_registry):
        toy_registry.register(FlowDefinition.of("remember", [
            lambda values, _: End(conversation={"last": "remember"}, profile={"name": "Ada"}),
        ]))
        record = ConversationRecord()
        engine = FlowEngine(toy_registry, record)
        engine.push("remember")

        assert record.data == {"last": "remember"}
        assert engine.profile_updates == {"name": "Ada"}
