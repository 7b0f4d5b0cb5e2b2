"""User-facing hints derived from the effective token state."""

from dataclasses import dataclass

from .models import DerivedTokenState, TokenState


@dataclass(frozen=True)
class TokenHints:
    """Which prompt or indicator the panel should show."""

    show_set_token: bool
    show_migrate: bool
    show_clear_plaintext: bool
    fully_migrated: bool
    show_secure_indicator: bool
    indicator_style: str              # "none", "ok" or "warning"

    def as_config(self, derived: DerivedTokenState) -> dict:
        """Panel config keys describing the secure-token indicator."""
        return {
            "hasSecurePat": derived.has_secure,
            "securePatOnly": derived.secure_pat_only,
            "residualPlaintext": derived.residual_plaintext,
            "secureTokenIndicator": self.indicator_style,
        }


def derive_hints(derived: DerivedTokenState) -> TokenHints:
    state = derived.state
    if state == TokenState.BOTH:
        style = "warning"
    elif state == TokenState.SECURE_ONLY:
        style = "ok"
    else:
        style = "none"

    return TokenHints(
        show_set_token=state == TokenState.NONE,
        show_migrate=state == TokenState.LEGACY_ONLY,
        show_clear_plaintext=derived.residual_plaintext,
        fully_migrated=derived.secure_pat_only,
        show_secure_indicator=derived.has_secure,
        indicator_style=style,
    )
