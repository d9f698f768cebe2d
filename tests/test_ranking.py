import random

import pytest

from leadscan.models import Lead, PageSignals
from leadscan.ranking import annotate, map_presence_probability, sort_and_rank


class FixedRandom(random.Random):
    def __init__(self, value):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


def _lead(name, score, **signals):
    return Lead(name=name, website=f"https://{name}.test", score=score, signals=PageSignals(**signals))


def test_ten_leads_get_expected_tiers():
    leads = [_lead(f"l{i}", 20 - i) for i in range(10)]
    ranked = sort_and_rank(list(reversed(leads)), random.Random(7))

    assert [l.name for l in ranked] == [l.name for l in leads]
    sources = [l.ranking.ranking_source for l in ranked]
    assert sources[:2] == ["google_ads"] * 2
    assert sources[2] == "organic_top"
    assert sources[3:8] == ["organic_first_page"] * 5
    assert sources[8:] == ["organic_second_page"] * 2
    assert [l.ranking.google_position for l in ranked] == list(range(1, 11))
    assert [l.ranking.is_sponsored for l in ranked] == [True, True] + [False] * 8
    assert ranked[0].ranking.ranking_badge == "Sponsored Ad"
    assert ranked[2].ranking.ranking_badge == "Top Organic"
    assert ranked[9].ranking.ranking_badge == "Second Page"


def test_ranking_score_non_increasing_and_lower_tier():
    ranked = sort_and_rank([_lead(f"l{i}", 20 - i) for i in range(20)], random.Random(1))
    scores = [l.ranking.ranking_score for l in ranked]
    assert scores == sorted(scores, reverse=True)
    assert scores[0] == 25 and scores[2] == 20 and scores[7] == 15 and scores[14] == 10 and scores[15] == 5
    assert ranked[15].ranking.ranking_source == "organic_lower"
    assert ranked[15].ranking.ranking_badge == "Lower Ranking"


def test_sort_is_stable_for_equal_scores():
    leads = [_lead("a", 10), _lead("b", 15), _lead("c", 10), _lead("d", 15)]
    ranked = sort_and_rank(leads, random.Random(0))
    assert [l.name for l in ranked] == ["b", "d", "a", "c"]


def test_ranking_does_not_change_score():
    leads = [_lead("a", 5), _lead("b", 9)]
    ranked = sort_and_rank(leads, random.Random(0))
    assert [l.score for l in ranked] == [9, 5]
    assert leads[0].ranking is None


def test_ad_spend_likelihood():
    leads = [_lead(f"l{i}", 0) for i in range(12)]
    leads[4] = _lead("chatty", 0, has_chat=True)
    leads[9] = _lead("former", 0, has_form=True)
    ranked = annotate(leads, random.Random(0))
    likelihood = [l.ranking.ad_spend_likelihood for l in ranked]
    assert likelihood[0] == likelihood[1] == "Very High"
    assert likelihood[2] == "High"
    assert likelihood[4] == "Medium-High"
    assert likelihood[5] == "Medium"
    assert likelihood[9] == "Low-Medium"
    assert likelihood[10] == "Low"


def test_map_presence_uses_injected_random():
    leads = [_lead(f"l{i}", 0) for i in range(25)]
    assert all(l.ranking.map_presence for l in annotate(leads, FixedRandom(0.0)))
    assert not any(l.ranking.map_presence for l in annotate(leads, FixedRandom(0.99)))

    first = [l.ranking.map_presence for l in annotate(leads, random.Random(42))]
    second = [l.ranking.map_presence for l in annotate(leads, random.Random(42))]
    assert first == second


def test_map_presence_probability_decays_to_floor():
    assert map_presence_probability(1) == pytest.approx(0.7)
    assert map_presence_probability(5) == pytest.approx(0.5)
    assert map_presence_probability(30) == pytest.approx(0.2)
