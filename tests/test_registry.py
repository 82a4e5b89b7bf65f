"""Tests for CommandKind and CommandRegistry."""

from __future__ import annotations

import pytest

from counter_model import Add, Counter, Increment, OnlyFromZero, Pick, Reset
from statecheck import (
    Command,
    CommandKind,
    CommandRegistry,
    GenerationExhausted,
    RegistryError,
    Selection,
    any_command,
)


class Remember(Command[int, Counter]):
    def __init__(self, state):
        self.seen = state


class NeedsName(Command[int, Counter]):
    def __init__(self, name):
        self.name = name


def _descriptions(registry: CommandRegistry, state: int, seeds: range) -> list[str]:
    return [registry.any_command(state).generate(seed, 10).value.describe() for seed in seeds]


class TestCommandKind:

    def test_default_constructor(self):
        kind = CommandKind(Increment)
        assert kind.name == "Increment"
        assert not kind.accepts_state
        assert not kind.accepts_draw

    def test_detects_injected_parameters(self):
        assert CommandKind(Remember).accepts_state
        assert CommandKind(Add).accepts_draw

    def test_state_passed_to_constructor(self):
        registry = CommandRegistry([Remember])
        command = registry.any_command(7).generate(1, 10).value
        assert command.seen == 7

    def test_unknown_required_parameter(self):
        with pytest.raises(RegistryError, match="name"):
            CommandKind(NeedsName)

    def test_not_callable(self):
        with pytest.raises(RegistryError):
            CommandKind(42)

    def test_weight_must_be_positive(self):
        with pytest.raises(RegistryError, match="positive"):
            CommandKind(Increment, weight=0)

    def test_custom_name(self):
        assert CommandKind(Increment, name="inc").name == "inc"


class TestRegistration:

    def test_register_call(self):
        registry = CommandRegistry()
        registry.register(Increment)
        registry.register(Reset, weight=2)
        assert len(registry) == 2
        assert [k.name for k in registry.kinds] == ["Increment", "Reset"]
        assert registry.kinds[1].weight == 2

    def test_register_decorator(self):
        registry = CommandRegistry()

        @registry.register(weight=3)
        class Noop(Command):
            pass

        assert Noop.__name__ == "Noop"
        assert registry.kinds[0].weight == 3

    def test_repr(self):
        registry = CommandRegistry([Increment, Reset])
        assert repr(registry) == "CommandRegistry([Increment, Reset], selection=uniform)"

    def test_max_attempts_must_be_positive(self):
        with pytest.raises(RegistryError):
            CommandRegistry([Increment], max_attempts=0)


class TestAnyCommand:

    def test_empty_registry(self):
        with pytest.raises(RegistryError, match="No command kinds"):
            CommandRegistry().any_command(0)

    def test_builds_registered_kinds(self):
        registry = CommandRegistry([Increment, Reset])
        assert set(_descriptions(registry, 0, range(100))) == {"Increment", "Reset"}

    def test_commands_are_sealed(self):
        command = CommandRegistry([Add]).any_command(0).generate(3, 10).value
        with pytest.raises(AttributeError):
            command.amount = 0

    def test_deterministic(self):
        registry = CommandRegistry([Increment, Reset, Add])
        assert _descriptions(registry, 0, range(20)) == _descriptions(registry, 0, range(20))

    def test_callable_as_generation_function(self):
        registry = CommandRegistry([Increment])
        assert registry(0).generate(1, 10).value.describe() == "Increment"

    def test_discarding_kind_is_retried(self):
        registry = CommandRegistry([OnlyFromZero, Increment])
        assert set(_descriptions(registry, 5, range(50))) == {"Increment"}
        assert "OnlyFromZero" in _descriptions(registry, 0, range(50))

    def test_exhausted_when_every_kind_discards(self):
        registry = CommandRegistry([OnlyFromZero], max_attempts=5)
        with pytest.raises(GenerationExhausted) as exc_info:
            registry.any_command(3).generate(1, 10)
        assert exc_info.value.attempts == 5
        assert exc_info.value.context.model_state == 3

    def test_weighted_selection(self):
        registry = CommandRegistry(selection="weighted")
        registry.register(Increment, weight=1)
        registry.register(Reset, weight=1000)
        assert registry.selection is Selection.WEIGHTED
        descriptions = _descriptions(registry, 0, range(200))
        assert descriptions.count("Reset") > 150

    def test_generator_keeps_kinds_it_was_built_with(self):
        registry = CommandRegistry([Increment])
        gen = registry.any_command(0)
        registry.register(Reset)
        assert gen.name == "any_command(Increment)"
        assert {gen.generate(seed, 10).value.describe() for seed in range(50)} == {"Increment"}

    def test_module_level_any_command(self):
        gen = any_command(Increment, Reset, state=0)
        assert gen.generate(1, 10).value.describe() in {"Increment", "Reset"}


class TestValueShrinking:

    def _add(self, minimum: int = 2):
        registry = CommandRegistry([Add])
        return next(
            s for s in (registry.any_command(0).generate(seed, 100) for seed in range(100))
            if s.value.amount >= minimum
        )

    def test_shrinks_rebuild_same_kind(self):
        shrinkable = self._add()
        candidates = list(shrinkable.shrinks())
        assert candidates
        assert all(isinstance(c.value, Add) for c in candidates)
        assert all(c.value.amount < shrinkable.value.amount for c in candidates)
        assert candidates[0].value.amount == 0

    def test_shrunk_commands_are_sealed(self):
        candidate = next(self._add().shrinks())
        with pytest.raises(AttributeError):
            candidate.value.amount = 50

    def test_default_constructed_kind_does_not_shrink(self):
        shrinkable = CommandRegistry([Reset]).any_command(0).generate(1, 10)
        assert list(shrinkable.shrinks()) == []

    def test_dependent_draws_stay_in_range(self):
        gen = CommandRegistry([Pick]).any_command(0)
        for seed in range(200):
            for candidate in gen.generate(seed, 100).shrinks():
                assert 1 <= candidate.value.n <= 10
                assert 0 <= candidate.value.k < candidate.value.n
