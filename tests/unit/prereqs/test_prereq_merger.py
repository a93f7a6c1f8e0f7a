"""Unit tests for PrereqMerger."""

from __future__ import annotations

import pytest

from dynreqs.build_config import BuildConfig
from dynreqs.conditions import ConditionEvaluator
from dynreqs.exceptions import (
    MalformedEntryError,
    MissingFragmentError,
    UnknownCommandError,
    UserError,
)
from dynreqs.predicates import PredicateContext, PredicateRegistry
from dynreqs.prereqs import ExpressionEntry, PrereqMerger, PrereqSpec, coerce_entries


@pytest.fixture
def evaluated() -> list[str]:
    return []


@pytest.fixture
def merger(registry: PredicateRegistry, fake_host, evaluated: list[str]) -> PrereqMerger:
    """Merger whose ``mark NAME`` predicate records evaluation order."""

    @registry.register("mark", min_args=1, max_args=1)
    def mark(ctx: PredicateContext, name: str) -> bool:
        evaluated.append(name)
        return True

    evaluator = ConditionEvaluator(
        registry=registry,
        context=PredicateContext(config=BuildConfig(), host=fake_host),
    )
    return PrereqMerger(evaluator)


class TestMerge:
    """Tests for folding matching entries."""

    def test_matching_entries_merged(self, merger: PrereqMerger) -> None:
        spec = merger.merge(
            [
                {"condition": "is_os linux", "prereqs": {"Bar": "1.3"}},
                {"condition": "is_os darwin", "prereqs": {"Mac": "1.0"}},
                {"condition": "is_os_type Unix", "prereqs": {"Baz": "1.4"}},
            ]
        )

        assert spec.as_dict() == {"runtime": {"requires": {"Bar": "1.3", "Baz": "1.4"}}}

    def test_phase_and_relation(self, merger: PrereqMerger) -> None:
        spec = merger.merge(
            [
                {
                    "condition": "is_os linux",
                    "prereqs": {"Test::More": "1.0"},
                    "phase": "test",
                    "relation": "recommends",
                }
            ]
        )

        assert spec.as_dict() == {"test": {"recommends": {"Test::More": "1.0"}}}

    def test_nested_fragment(self, merger: PrereqMerger) -> None:
        fragment = {"build": {"requires": {"Builder": "0.5"}}}

        spec = merger.merge([{"condition": "is_os linux", "prereqs": fragment}])

        assert spec.as_dict() == fragment

    def test_seed_merged(self, merger: PrereqMerger) -> None:
        seed = {"runtime": {"requires": {"Foo": ">=1.0"}}}

        spec = merger.merge(
            [{"condition": "is_os linux", "prereqs": {"Foo": "<2.0", "Bar": "1"}}],
            seed=seed,
        )

        assert spec.requirements_for("runtime", "requires") == {
            "Foo": ">= 1.0, < 2.0",
            "Bar": "1",
        }

    def test_no_match_returns_seed_unchanged(self, merger: PrereqMerger) -> None:
        seed = PrereqSpec.from_fragment({"Foo": ">=1.0"})

        spec = merger.merge(
            [{"condition": "is_os darwin", "prereqs": {"Mac": "1.0"}}], seed=seed
        )

        assert spec is seed

    def test_empty_list_returns_seed_unchanged(self, merger: PrereqMerger) -> None:
        seed = PrereqSpec({"configure": {"requires": {"Foo": "== 1.0"}}})

        assert merger.merge([], seed=seed) is seed
        assert merger.merge([], seed=seed).as_dict() == {
            "configure": {"requires": {"Foo": "== 1.0"}}
        }

    def test_default_seed_is_empty(self, merger: PrereqMerger) -> None:
        assert merger.merge([]).is_empty()

    def test_accepts_models(self, merger: PrereqMerger) -> None:
        entry = ExpressionEntry(condition="is_os linux", prereqs={"Bar": "1.3"})

        spec = merger.merge([entry])

        assert spec.requirements_for("runtime", "requires") == {"Bar": "1.3"}

    def test_impossible_and_never_contributes(
        self, merger: PrereqMerger, fake_host
    ) -> None:
        """Test an and with an always-false half never adds its fragment."""
        fake_host.modules["SomeModule"] = "2.5"

        spec = merger.merge(
            [
                {
                    "condition": [
                        "and",
                        ["has_module", "SomeModule", "2"],
                        ["is_os", "non-existent"],
                    ],
                    "prereqs": {"Never": "1.0"},
                },
                {"condition": "is_os linux", "prereqs": {"Always": "1.0"}},
            ]
        )

        assert spec.as_dict() == {"runtime": {"requires": {"Always": "1.0"}}}


class TestErrors:
    """Tests for error entries and invalid entries."""

    def test_error_entry_aborts(self, merger: PrereqMerger, evaluated: list[str]) -> None:
        """Test a true error entry raises its literal message and stops."""
        with pytest.raises(UserError) as exc_info:
            merger.merge(
                [
                    {"condition": "mark first", "prereqs": {"Foo": "1"}},
                    {"condition": "mark second", "error": "Threads are required"},
                    {"condition": "mark third", "prereqs": {"Bar": "1"}},
                ]
            )

        assert exc_info.value.message == "Threads are required"
        assert str(exc_info.value) == "Threads are required"
        assert not exc_info.value.is_unsupported_platform
        assert evaluated == ["first", "second"]

    def test_false_error_entry_skipped(self, merger: PrereqMerger) -> None:
        spec = merger.merge(
            [
                {"condition": "!is_os_type Unix", "error": "OS unsupported"},
                {"condition": "is_os linux", "prereqs": {"Baz": "1.4"}},
            ]
        )

        assert spec.requirements_for("runtime", "requires") == {"Baz": "1.4"}

    @pytest.mark.parametrize("message", ["No support for OS", "OS unsupported"])
    def test_unsupported_platform_messages(
        self, merger: PrereqMerger, message: str
    ) -> None:
        with pytest.raises(UserError) as exc_info:
            merger.merge([{"condition": "is_os linux", "error": message}])

        assert exc_info.value.message == message
        assert exc_info.value.is_unsupported_platform

    def test_missing_fragment_fails_before_evaluation(
        self, merger: PrereqMerger, evaluated: list[str]
    ) -> None:
        with pytest.raises(MissingFragmentError) as exc_info:
            merger.merge(
                [
                    {"condition": "mark first", "prereqs": {"Foo": "1"}},
                    {"condition": "mark second"},
                ]
            )

        assert exc_info.value.index == 1
        assert "Expression entry 1" in exc_info.value.message
        assert evaluated == []

    def test_both_prereqs_and_error_rejected(self, merger: PrereqMerger) -> None:
        with pytest.raises(MalformedEntryError, match="only one"):
            merger.merge(
                [{"condition": "is_os linux", "prereqs": {"Foo": "1"}, "error": "x"}]
            )

    def test_entry_without_condition_rejected(self, merger: PrereqMerger) -> None:
        with pytest.raises(MalformedEntryError) as exc_info:
            merger.merge([{"prereqs": {"Foo": "1"}}])

        assert exc_info.value.index == 0

    def test_entry_not_a_mapping(self, merger: PrereqMerger) -> None:
        with pytest.raises(MalformedEntryError):
            merger.merge(["is_os linux"])  # type: ignore[list-item]

    def test_malformed_fragment_reports_index(self, merger: PrereqMerger) -> None:
        with pytest.raises(MalformedEntryError) as exc_info:
            merger.merge(
                [
                    {"condition": "is_os darwin", "prereqs": {"Foo": "1"}},
                    {"condition": "is_os linux", "prereqs": {"Foo": "1", "x": {}}},
                ]
            )

        assert exc_info.value.index == 1

    def test_unknown_command_propagates(self, merger: PrereqMerger) -> None:
        with pytest.raises(UnknownCommandError):
            merger.merge(
                [{"condition": ["totally_bogus_predicate"], "prereqs": {"Foo": "1"}}]
            )


class TestCoerceEntries:
    """Tests for entry validation."""

    def test_defaults(self) -> None:
        (entry,) = coerce_entries([{"condition": "can_xs", "prereqs": {}}])

        assert entry.phase == "runtime"
        assert entry.relation == "requires"

    def test_null_phase_and_relation_take_defaults(self) -> None:
        (entry,) = coerce_entries(
            [{"condition": "can_xs", "prereqs": {}, "phase": None, "relation": ""}]
        )

        assert entry.phase == "runtime"
        assert entry.relation == "requires"

    def test_unknown_keys_ignored(self) -> None:
        (entry,) = coerce_entries(
            [{"condition": "can_xs", "error": "nope", "comment": "ignored"}]
        )

        assert entry.error == "nope"
