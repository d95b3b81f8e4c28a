"""Unit tests for privilege levels and the privilege-level table."""

from __future__ import annotations

import pytest

from netcfg.core.exceptions import ConfigSessionAlreadyExistsError, PrivilegeEscalationError
from netcfg.core.privilege import (
    CONFIGURATION,
    EXEC,
    PRIVILEGE_EXEC,
    PrivilegeLevel,
    PrivilegeLevelTable,
    strip_inline_flags,
)
from netcfg.platforms.eos import session_prompt_pattern


def _session_level(name: str) -> PrivilegeLevel:
    return PrivilegeLevel(
        name=name,
        pattern=session_prompt_pattern(name),
        previous_priv=PRIVILEGE_EXEC,
        escalate=f"configure session {name}",
        deescalate="end",
    )


@pytest.fixture
def table() -> PrivilegeLevelTable:
    """A table holding the default EOS levels."""
    return PrivilegeLevelTable()


class TestPrivilegeLevel:
    """Tests for the PrivilegeLevel dataclass."""

    def test_immutability(self) -> None:
        level = _session_level("netcfg_1")
        with pytest.raises(AttributeError):
            level.name = "other"  # type: ignore[misc]

    def test_defaults(self) -> None:
        level = _session_level("netcfg_1")
        assert level.escalate_auth is False
        assert level.escalate_prompt == ""
        assert level.not_contains == ()


class TestPrivilegeLevelTable:
    """Tests for registration, lookup, and prompt resolution."""

    def test_default_levels(self, table: PrivilegeLevelTable) -> None:
        assert list(table) == [EXEC, PRIVILEGE_EXEC, CONFIGURATION]
        assert len(table) == 3

    def test_register_and_lookup(self, table: PrivilegeLevelTable) -> None:
        table.register(_session_level("netcfg_1"))
        assert "netcfg_1" in table
        assert table["netcfg_1"].escalate == "configure session netcfg_1"

    def test_register_duplicate_raises(self, table: PrivilegeLevelTable) -> None:
        table.register(_session_level("netcfg_1"))
        with pytest.raises(ConfigSessionAlreadyExistsError, match="already registered"):
            table.register(_session_level("netcfg_1"))

    def test_unknown_level_raises(self, table: PrivilegeLevelTable) -> None:
        with pytest.raises(PrivilegeEscalationError, match="Unknown privilege level"):
            table["nope"]

    @pytest.mark.parametrize(
        "prompt,expected",
        [
            ("leaf1>", EXEC),
            ("leaf1#", PRIVILEGE_EXEC),
            ("leaf1(config)#", CONFIGURATION),
            ("leaf1(config-if-Et1)#", CONFIGURATION),
            ("leaf1(config-s-netcfg)#", None),
        ],
    )
    def test_resolve_default_prompts(
        self, table: PrivilegeLevelTable, prompt: str, expected: str | None
    ) -> None:
        assert table.resolve(prompt) == expected

    def test_session_prompt_needs_recompile(self, table: PrivilegeLevelTable) -> None:
        table.register(_session_level("netcfg_1"))
        assert table.resolve("leaf1(config-s-netcfg)#") is None
        assert not table.all_prompts.search("leaf1(config-s-netcfg)#")
        table.recompile()
        assert table.resolve("leaf1(config-s-netcfg)#") == "netcfg_1"
        assert table.all_prompts.search("leaf1(config-s-netcfg)#")

    def test_session_prompt_in_sub_mode(self, table: PrivilegeLevelTable) -> None:
        table.register(_session_level("netcfg_1"))
        table.recompile()
        assert table.resolve("leaf1(config-s-netcfg-if-Et1)#") == "netcfg_1"

    def test_colliding_sessions_prefer_given_name(self, table: PrivilegeLevelTable) -> None:
        table.register(_session_level("netcfg_1"))
        table.register(_session_level("netcfg_2"))
        table.recompile()
        prompt = "leaf1(config-s-netcfg)#"
        assert table.resolve(prompt, preferred=("netcfg_2",)) == "netcfg_2"
        assert table.resolve(prompt, preferred=("privilege_exec", "netcfg_1")) == "netcfg_1"

    def test_path_to(self, table: PrivilegeLevelTable) -> None:
        table.register(_session_level("netcfg_1"))
        assert table.path_to("netcfg_1") == [EXEC, PRIVILEGE_EXEC, "netcfg_1"]
        assert table.path_to(EXEC) == [EXEC]

    def test_path_to_cycle_raises(self) -> None:
        table = PrivilegeLevelTable(
            (
                PrivilegeLevel(name="a", pattern=r"a>", previous_priv="b", escalate="", deescalate=""),
                PrivilegeLevel(name="b", pattern=r"b>", previous_priv="a", escalate="", deescalate=""),
            )
        )
        with pytest.raises(PrivilegeEscalationError, match="cycle"):
            table.path_to("a")


class TestSessionPromptPattern:
    """Tests for the generated session prompt pattern."""

    def test_uses_escaped_six_char_prefix(self) -> None:
        pattern = session_prompt_pattern("a.b+c_d_1700000000")
        assert r"config\-s\-a\.b\+c_[" in pattern

    def test_short_name(self) -> None:
        table = PrivilegeLevelTable()
        table.register(_session_level("s1"))
        table.recompile()
        assert table.resolve("leaf1(config-s-s1)#") == "s1"


def test_strip_inline_flags() -> None:
    assert strip_inline_flags(r"(?im)^foo$") == r"^foo$"
    assert strip_inline_flags(r"^foo$") == r"^foo$"
