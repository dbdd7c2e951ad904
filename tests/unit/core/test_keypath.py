"""Unit tests for dotted key path helpers."""

import pytest
from configward.core.keypath import (
    get_value,
    has_value,
    set_value,
    split_key_path,
    unset_value,
)


class TestSplitKeyPath:
    """Tests for split_key_path function."""

    def test_dotted_key(self) -> None:
        """Segments are split on dots."""
        assert split_key_path("gateway.auth.mode") == ["gateway", "auth", "mode"]

    @pytest.mark.parametrize("key", ["", ".", "gateway.", ".port", "a..b"])
    def test_invalid_keys(self, key: str) -> None:
        """Empty keys and empty segments are rejected."""
        with pytest.raises(ValueError, match="Invalid config key"):
            split_key_path(key)


class TestGetValue:
    """Tests for get_value and has_value functions."""

    def test_nested_value(self) -> None:
        """Nested values are returned."""
        doc = {"gateway": {"auth": {"mode": "token"}}}
        assert get_value(doc, "gateway.auth.mode") == "token"

    def test_missing_returns_default(self) -> None:
        """Missing segments return the default."""
        assert get_value({"gateway": {}}, "gateway.port", 5) == 5

    def test_through_scalar(self) -> None:
        """Descending into a scalar is treated as missing."""
        assert get_value({"gateway": 3}, "gateway.port") is None

    def test_has_value_with_none(self) -> None:
        """A key explicitly set to null is present."""
        doc = {"gateway": {"bind": None}}
        assert has_value(doc, "gateway.bind") is True
        assert has_value(doc, "gateway.port") is False


class TestSetValue:
    """Tests for set_value function."""

    def test_creates_intermediate_objects(self) -> None:
        """Missing intermediate mappings are created."""
        doc: dict = {}
        set_value(doc, "gateway.auth.mode", "none")
        assert doc == {"gateway": {"auth": {"mode": "none"}}}

    def test_overwrites_existing_value(self) -> None:
        """Existing leaf values are replaced."""
        doc = {"gateway": {"port": 1, "bind": "lo"}}
        set_value(doc, "gateway.port", 2)
        assert doc == {"gateway": {"port": 2, "bind": "lo"}}

    def test_scalar_in_the_way(self) -> None:
        """A scalar intermediate raises ValueError."""
        with pytest.raises(ValueError, match="gateway is not an object"):
            set_value({"gateway": 3}, "gateway.port", 1)


class TestUnsetValue:
    """Tests for unset_value function."""

    def test_removes_value(self) -> None:
        """The leaf is removed and its siblings kept."""
        doc = {"gateway": {"port": 1, "bind": "lo"}}

        assert unset_value(doc, "gateway.bind") is True
        assert doc == {"gateway": {"port": 1}}

    def test_missing_key(self) -> None:
        """Missing keys report False."""
        assert unset_value({"gateway": {}}, "gateway.bind") is False
        assert unset_value({}, "gateway.bind") is False
        assert unset_value({"gateway": 3}, "gateway.bind") is False
