"""Tests for dead key name resolution."""

import pytest

from klay.convert import (
    ChainedDeadKeyResolver,
    DeadKeyResolverProtocol,
    MappingDeadKeyResolver,
    MemoizingDeadKeyResolver,
    PromptDeadKeyResolver,
    parse_dead_key_names,
)


class TestResolvers:
    def test_mapping(self):
        resolver = MappingDeadKeyResolver({"´": "acute"})
        assert resolver.resolve("´") == "acute"
        assert resolver.resolve("`") is None

    def test_prompt_strips_dead_prefix(self):
        resolver = PromptDeadKeyResolver(lambda char: "  dead_grave \n")
        assert resolver.resolve("`") == "grave"

    def test_empty_answer_keeps_literal(self):
        resolver = PromptDeadKeyResolver(lambda char: "")
        assert resolver.resolve("`") is None

    def test_memoizing_asks_once(self):
        asked: list[str] = []

        def prompt(char: str) -> str:
            asked.append(char)
            return "acute"

        resolver = MemoizingDeadKeyResolver(PromptDeadKeyResolver(prompt))
        assert resolver.resolve("´") == "acute"
        assert resolver.resolve("´") == "acute"
        assert asked == ["´"]

    def test_memoizing_remembers_literal_answers(self):
        asked: list[str] = []

        def prompt(char: str) -> str:
            asked.append(char)
            return ""

        resolver = MemoizingDeadKeyResolver(PromptDeadKeyResolver(prompt))
        assert resolver.resolve("~") is None
        assert resolver.resolve("~") is None
        assert len(asked) == 1

    def test_chain_falls_through(self):
        resolver = ChainedDeadKeyResolver(
            MappingDeadKeyResolver({"´": "acute"}),
            PromptDeadKeyResolver(lambda char: "tilde"),
        )
        assert resolver.resolve("´") == "acute"
        assert resolver.resolve("~") == "tilde"

    def test_protocol(self):
        for resolver in (
            MappingDeadKeyResolver(),
            PromptDeadKeyResolver(lambda char: ""),
            ChainedDeadKeyResolver(),
        ):
            assert isinstance(resolver, DeadKeyResolverProtocol)


class TestParseDeadKeyNames:
    @pytest.mark.parametrize("code", ["00b4", "U+00B4", "0xb4", "Ub4", "´"])
    def test_code_point_forms(self, code):
        assert parse_dead_key_names({code: "acute"}) == {"´": "acute"}

    def test_dead_prefix_removed(self):
        assert parse_dead_key_names({"60": "dead_grave"}) == {"`": "grave"}

    def test_invalid_code_point(self):
        with pytest.raises(ValueError):
            parse_dead_key_names({"xyz": "acute"})
