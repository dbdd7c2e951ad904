"""Unit tests for legacy config key detection and rewriting."""

from configward.core.legacy import (
    LEGACY_CONFIG_RULES,
    apply_legacy_migrations,
    find_legacy_config_issues,
)


class TestFindLegacyConfigIssues:
    """Tests for find_legacy_config_issues function."""

    def test_clean_config(self) -> None:
        """A current config has no legacy issues."""
        assert find_legacy_config_issues({"agents": {}, "gateway": {"port": 1}}) == []

    def test_non_object(self) -> None:
        """Non-object documents have no legacy issues."""
        assert find_legacy_config_issues(["agent"]) == []
        assert find_legacy_config_issues(None) == []

    def test_detects_all_rules_in_order(self) -> None:
        """One issue per matching rule, in rule order."""
        data = {"routing": {}, "gateway": {"token": "t"}, "agent": {"model": "x"}}

        issues = find_legacy_config_issues(data)

        assert [issue.path for issue in issues] == [rule.path for rule in LEGACY_CONFIG_RULES]
        assert issues[1].message == "'gateway.token' moved to 'gateway.auth.token'"


class TestApplyLegacyMigrations:
    """Tests for apply_legacy_migrations function."""

    def test_does_not_mutate_input(self) -> None:
        """The input document is left unchanged."""
        data = {"agent": {"model": "x"}}

        migrated, _ = apply_legacy_migrations(data)

        assert data == {"agent": {"model": "x"}}
        assert migrated is not data

    def test_agent_moves_to_defaults(self) -> None:
        """Legacy 'agent' settings become agent defaults."""
        migrated, applied = apply_legacy_migrations(
            {"agent": {"model": "x", "name": "bot"}, "agents": {"defaults": {"model": "y"}}}
        )

        assert "agent" not in migrated
        # Existing defaults win over legacy values
        assert migrated["agents"]["defaults"] == {"model": "y", "name": "bot"}
        assert applied == ["'agent' was replaced by 'agents.defaults'"]

    def test_gateway_token_moves_to_auth(self) -> None:
        """Legacy gateway.token becomes token auth."""
        migrated, _ = apply_legacy_migrations({"gateway": {"port": 1, "token": "secret"}})

        assert migrated["gateway"] == {
            "port": 1,
            "auth": {"mode": "token", "token": "secret"},
        }

    def test_routing_moves_to_messages(self) -> None:
        """Legacy top-level routing moves under messages."""
        migrated, _ = apply_legacy_migrations({"routing": {"default": "main"}})

        assert migrated == {"messages": {"routing": {"default": "main"}}}

    def test_nothing_to_apply(self) -> None:
        """A clean config is returned as an equal copy."""
        migrated, applied = apply_legacy_migrations({"agents": {}})

        assert migrated == {"agents": {}}
        assert applied == []
