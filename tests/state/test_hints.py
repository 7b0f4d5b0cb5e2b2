"""Tests for user-facing hints."""

import pytest

from token_reconciler.state.hints import derive_hints
from token_reconciler.state.models import DerivedTokenState, TokenState


def _hints(has_secure, has_legacy):
    derived = DerivedTokenState.from_presence(has_secure, has_legacy)
    return derived, derive_hints(derived)


class TestDeriveHints:
    """Test hint selection for each state."""

    def test_none_prompts_for_token(self):
        _, hints = _hints(False, False)
        assert hints.show_set_token is True
        assert hints.show_secure_indicator is False
        assert hints.indicator_style == "none"

    def test_legacy_only_prompts_migration(self):
        _, hints = _hints(False, True)
        assert hints.show_migrate is True
        assert hints.show_secure_indicator is False

    def test_both_prompts_clear_plaintext(self):
        _, hints = _hints(True, True)
        assert hints.show_clear_plaintext is True
        assert hints.show_secure_indicator is True
        assert hints.indicator_style == "warning"

    def test_secure_only_fully_migrated(self):
        _, hints = _hints(True, False)
        assert hints.fully_migrated is True
        assert hints.show_secure_indicator is True
        assert hints.indicator_style == "ok"

    @pytest.mark.parametrize("has_secure,has_legacy", [
        (False, False), (False, True), (True, False), (True, True)
    ])
    def test_exactly_one_action_hint(self, has_secure, has_legacy):
        _, hints = _hints(has_secure, has_legacy)
        flags = [hints.show_set_token, hints.show_migrate,
                 hints.show_clear_plaintext, hints.fully_migrated]
        assert flags.count(True) == 1


class TestPanelConfig:
    """Test the panel config rendering."""

    def test_residual_config(self):
        derived, hints = _hints(True, True)
        assert derived.state == TokenState.BOTH
        assert hints.as_config(derived) == {
            "hasSecurePat": True,
            "securePatOnly": False,
            "residualPlaintext": True,
            "secureTokenIndicator": "warning",
        }

    def test_secure_only_config(self):
        derived, hints = _hints(True, False)
        config = hints.as_config(derived)
        assert config["securePatOnly"] is True
        assert config["residualPlaintext"] is False
