"""
Deterministic lead score.

A fixed-weight sum over ``PageSignals`` clamped to ``[0, cap]``. Weights live
in named profiles so the batch path and the single-URL scan path can differ
without forking the scorer.
"""

from dataclasses import dataclass, replace

from .models import PageSignals


@dataclass(frozen=True)
class ScoringProfile:
    name: str
    base: int = 5
    chat: int = 8
    contact_form: int = 7
    any_form: int = 2
    phones: int = 3
    emails: int = 2
    technologies: int = 1
    cap: int = 20
    # When true the any-form bonus is added even if a contact form was found.
    stack_any_form: bool = False


PROFILES = {
    "standard": ScoringProfile(name="standard"),
    "single_scan": ScoringProfile(name="single_scan", cap=25, stack_any_form=True),
}


def get_profile(name: str, cfg: dict | None = None) -> ScoringProfile:
    """Look up a named profile, applying any per-weight overrides from config."""
    overrides = ((cfg or {}).get("scoring", {}).get("profiles") or {}).get(name) or {}
    base = PROFILES.get(name)
    if base is None:
        if not overrides:
            raise KeyError(f"Unknown scoring profile: {name}")
        base = ScoringProfile(name=name)
    return replace(base, **overrides) if overrides else base


def score(signals: PageSignals, profile: ScoringProfile = PROFILES["standard"]) -> int:
    total = profile.base
    if signals.has_chat:
        total += profile.chat
    if signals.has_form:
        total += profile.contact_form
    if signals.has_any_form and (profile.stack_any_form or not signals.has_form):
        total += profile.any_form
    if signals.phones:
        total += profile.phones
    if signals.emails:
        total += profile.emails
    if signals.technologies:
        total += profile.technologies
    return max(0, min(total, profile.cap))
