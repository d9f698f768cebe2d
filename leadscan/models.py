from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


class FetchError(Exception):
    """Raised inside the fetcher; ``reason`` ends up on the sentinel lead."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ValidationError(ValueError):
    """Malformed request payload; surfaced to the caller as a client error."""


@dataclass(frozen=True)
class Candidate:
    url: str
    name: Optional[str] = None
    location: Optional[str] = None
    industry: Optional[str] = None


@dataclass(frozen=True)
class FetchResult:
    ok: bool
    html: str = ""
    final_url: str = ""
    reason: Optional[str] = None

    @classmethod
    def success(cls, html: str, final_url: str) -> "FetchResult":
        return cls(ok=True, html=html, final_url=final_url)

    @classmethod
    def failure(cls, reason: str) -> "FetchResult":
        return cls(ok=False, reason=reason)


@dataclass(frozen=True)
class PageSignals:
    has_chat: bool = False
    has_form: bool = False
    has_any_form: bool = False
    phones: tuple = ()
    emails: tuple = ()
    technologies: tuple = ()
    forms_count: int = 0
    contact_forms_count: int = 0

    @classmethod
    def empty(cls) -> "PageSignals":
        return cls()


@dataclass(frozen=True)
class RankingAnnotation:
    google_position: int
    is_sponsored: bool
    ranking_source: str
    ranking_badge: str
    ranking_score: int
    map_presence: bool
    ad_spend_likelihood: str


def _int_field(data: dict, key: str) -> int:
    try:
        return int(data.get(key) or 0)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid lead {key}: {data.get(key)!r}")


@dataclass(frozen=True)
class Lead:
    name: str
    website: str
    location: Optional[str] = None
    industry: Optional[str] = None
    signals: PageSignals = field(default_factory=PageSignals)
    score: int = 0
    description: str = ""
    error: Optional[str] = None
    is_sample: bool = False
    ranking: Optional[RankingAnnotation] = None
    analyzed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        s = self.signals
        data = {
            "name": self.name,
            "website": self.website,
            "location": self.location,
            "industry": self.industry,
            "score": self.score,
            "hasChat": s.has_chat,
            "hasForm": s.has_form,
            "hasAnyForm": s.has_any_form,
            "phones": list(s.phones),
            "emails": list(s.emails),
            "technologies": list(s.technologies),
            "formsCount": s.forms_count,
            "contactFormsCount": s.contact_forms_count,
            "description": self.description,
            "error": self.error,
            "isSample": self.is_sample,
            "analyzedAt": self.analyzed_at.isoformat(),
        }
        if self.ranking:
            r = self.ranking
            data.update(
                {
                    "googlePosition": r.google_position,
                    "isSponsored": r.is_sponsored,
                    "rankingSource": r.ranking_source,
                    "rankingBadge": r.ranking_badge,
                    "rankingScore": r.ranking_score,
                    "mapPresence": r.map_presence,
                    "adSpendLikelihood": r.ad_spend_likelihood,
                }
            )
        return data

    @classmethod
    def from_dict(cls, data) -> "Lead":
        if not isinstance(data, dict):
            raise ValidationError("Each lead must be a JSON object.")
        if not data.get("name") and not data.get("website"):
            raise ValidationError("Lead is missing both 'name' and 'website'.")
        phones = data.get("phones") or []
        emails = data.get("emails") or []
        if not isinstance(phones, list) or not isinstance(emails, list):
            raise ValidationError("Lead 'phones' and 'emails' must be lists.")
        score = _int_field(data, "score")
        forms_count = _int_field(data, "formsCount")
        contact_forms_count = _int_field(data, "contactFormsCount")

        has_form = bool(data.get("hasForm"))
        signals = PageSignals(
            has_chat=bool(data.get("hasChat")),
            has_form=has_form,
            has_any_form=bool(data.get("hasAnyForm", has_form)),
            phones=tuple(str(p) for p in phones),
            emails=tuple(str(e) for e in emails),
            technologies=tuple(str(t) for t in data.get("technologies") or []),
            forms_count=forms_count,
            contact_forms_count=contact_forms_count,
        )
        return cls(
            name=str(data.get("name") or ""),
            website=str(data.get("website") or ""),
            location=data.get("location"),
            industry=data.get("industry"),
            signals=signals,
            score=score,
            description=str(data.get("description") or ""),
            error=data.get("error"),
            is_sample=bool(data.get("isSample")),
        )
