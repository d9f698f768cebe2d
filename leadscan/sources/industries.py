from types import MappingProxyType

from ..models import Candidate


INDUSTRIES = MappingProxyType(
    {
        "dental": {
            "search_query": "best dental {location}",
            "keywords": ["dental implants", "teeth whitening", "cosmetic dentistry"],
            "websites": [
                {"name": "Aspen Dental", "url": "https://www.aspendental.com"},
                {"name": "Western Dental", "url": "https://www.westerndental.com"},
                {"name": "Coast Dental", "url": "https://www.coastdental.com"},
            ],
        },
        "mortgage": {
            "search_query": "mortgage lenders {location}",
            "keywords": ["home loan", "refinance", "mortgage rates"],
            "websites": [
                {"name": "Rocket Mortgage", "url": "https://www.rocketmortgage.com"},
                {"name": "LoanDepot", "url": "https://www.loandepot.com"},
                {"name": "Better Mortgage", "url": "https://www.better.com"},
            ],
        },
        "lawyer": {
            "search_query": "best attorneys {location}",
            "keywords": ["personal injury lawyer", "divorce attorney", "legal defense"],
            "websites": [
                {"name": "Morgan & Morgan", "url": "https://www.forthepeople.com"},
                {"name": "LegalZoom", "url": "https://www.legalzoom.com"},
                {"name": "Avvo", "url": "https://www.avvo.com"},
            ],
        },
        "realestate": {
            "search_query": "real estate agents {location}",
            "keywords": ["realtor", "property agents", "home sales"],
            "websites": [
                {"name": "Zillow", "url": "https://www.zillow.com"},
                {"name": "Realtor.com", "url": "https://www.realtor.com"},
                {"name": "Redfin", "url": "https://www.redfin.com"},
            ],
        },
        "insurance": {
            "search_query": "insurance companies {location}",
            "keywords": ["auto insurance", "home insurance", "life insurance"],
            "websites": [
                {"name": "Geico", "url": "https://www.geico.com"},
                {"name": "State Farm", "url": "https://www.statefarm.com"},
                {"name": "Progressive", "url": "https://www.progressive.com"},
            ],
        },
    }
)


def industry_table(cfg: dict) -> dict:
    table = dict(INDUSTRIES)
    table.update(cfg.get("industries") or {})
    return table


def search_query(industry: str, location: str, cfg: dict, custom_query: str | None = None) -> str:
    if custom_query:
        return custom_query
    conf = industry_table(cfg).get(industry) or {}
    template = conf.get("search_query") or f"{industry} {{location}}"
    return template.format(location=location)


def industry_candidates(industry: str, location: str, cfg: dict) -> list[Candidate]:
    conf = industry_table(cfg).get(industry)
    if not conf:
        return []
    return [
        Candidate(url=site["url"], name=site.get("name"), location=location, industry=industry)
        for site in conf.get("websites") or []
        if site.get("url")
    ]
