import random
import re

from ..models import Lead, PageSignals
from ..scoring import PROFILES, score
from ..utils import normalize_phone


TEMPLATES = {
    "dental": [
        "Smile Perfect Dental",
        "Bright Now Dentistry",
        "Family Dental Care",
        "Modern Dental Solutions",
        "Elite Dental Group",
    ],
    "mortgage": ["Premier Mortgage Solutions", "Home Loan Experts", "First Rate Mortgage", "Capital Lending Group"],
    "lawyer": ["Justice Law Partners", "Elite Legal Defense", "Premier Law Group", "City Law Associates"],
    "realestate": ["Premier Properties", "Elite Realty Group", "Dream Home Realty", "City Real Estate Partners"],
    "insurance": [
        "Secure Insurance Solutions",
        "Trusted Coverage Inc",
        "Premier Protection",
        "Family Insurance Group",
    ],
}
AREA_CODES = ["212", "310", "415", "312", "305", "702", "773", "347", "917", "646"]
PREFIXES = ["555", "556", "557", "558", "559", "560", "561", "562", "563", "564"]


def sample_phone(index: int, rng: random.Random) -> str:
    line = 1000 + (index * 37) % 9000
    return f"({rng.choice(AREA_CODES)}) {rng.choice(PREFIXES)}-{line}"


def generate_sample_leads(industry: str, location: str, count: int = 12, rng: random.Random | None = None) -> list[Lead]:
    """Placeholder leads for demos, sorted by score (stable)."""
    rng = rng or random.Random()
    names = TEMPLATES.get(industry) or TEMPLATES["dental"]
    leads = []
    for i in range(count):
        name = f"{names[i % len(names)]} - {location}"
        domain = re.sub(r"[^a-z0-9]", "", name.lower())
        has_chat = i < 4
        has_form = i < 8
        phones = (normalize_phone(sample_phone(i, rng)),) if i < 10 else ()
        emails = (f"contact@{domain}.com",) if i < 7 else ()
        signals = PageSignals(
            has_chat=has_chat,
            has_form=has_form,
            has_any_form=has_form,
            phones=phones,
            emails=emails,
            forms_count=int(has_form),
            contact_forms_count=int(has_form),
        )
        leads.append(
            Lead(
                name=name,
                website=f"https://www.{domain}.com",
                location=location,
                industry=industry,
                signals=signals,
                score=score(signals, PROFILES["standard"]),
                description=f"Professional {industry} services in {location}",
                is_sample=True,
            )
        )
    return sorted(leads, key=lambda lead: -lead.score)
