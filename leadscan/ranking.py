import random
from dataclasses import replace

from .models import Lead, RankingAnnotation


# (last rank in tier, source, badge); sponsored tier is handled first
TIERS = [
    (3, "organic_top", "Top Organic"),
    (8, "organic_first_page", "First Page"),
    (15, "organic_second_page", "Second Page"),
]
SPONSORED_SLOTS = 2


def ranking_tier(position: int) -> tuple[bool, str, str]:
    if position <= SPONSORED_SLOTS:
        return True, "google_ads", "Sponsored Ad"
    for last, source, badge in TIERS:
        if position <= last:
            return False, source, badge
    return False, "organic_lower", "Lower Ranking"


def ranking_score(position: int, is_sponsored: bool) -> int:
    if is_sponsored:
        return 25
    if position <= 3:
        return 20
    if position <= 8:
        return 15
    if position <= 15:
        return 10
    return 5


def map_presence_probability(position: int) -> float:
    return max(0.7 - 0.05 * (position - 1), 0.2)


def ad_spend_likelihood(lead: Lead, position: int, is_sponsored: bool) -> str:
    if is_sponsored:
        return "Very High"
    if position <= 3:
        return "High"
    if position <= 8 and lead.signals.has_chat:
        return "Medium-High"
    if position <= 8:
        return "Medium"
    if lead.signals.has_chat or lead.signals.has_form:
        return "Low-Medium"
    return "Low"


def annotate(leads: list[Lead], rng: random.Random | None = None) -> list[Lead]:
    """Attach a position-based ranking to an already score-sorted batch."""
    rng = rng or random.Random()
    ranked = []
    for index, lead in enumerate(leads):
        position = index + 1
        sponsored, source, badge = ranking_tier(position)
        annotation = RankingAnnotation(
            google_position=position,
            is_sponsored=sponsored,
            ranking_source=source,
            ranking_badge=badge,
            ranking_score=ranking_score(position, sponsored),
            map_presence=rng.random() < map_presence_probability(position),
            ad_spend_likelihood=ad_spend_likelihood(lead, position, sponsored),
        )
        ranked.append(replace(lead, ranking=annotation))
    return ranked


def sort_and_rank(leads: list[Lead], rng: random.Random | None = None) -> list[Lead]:
    # sorted() is stable, so equal scores keep input order
    return annotate(sorted(leads, key=lambda lead: -lead.score), rng)
