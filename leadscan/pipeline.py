import logging
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor

from .detectors import DetectorTables, detect
from .fetch import fetch
from .models import Candidate, Lead, PageSignals
from .parse import parse
from .ranking import sort_and_rank
from .scoring import ScoringProfile, get_profile, score
from .utils import extract_name_from_html, host_of, normalize_website

logger = logging.getLogger(__name__)


class HostThrottle:
    """Enforces a minimum gap between successive fetches to the same host."""

    def __init__(self, delay_s: float):
        self.delay_s = max(0.0, float(delay_s))
        self._lock = threading.Lock()
        self._host_locks: dict[str, threading.Lock] = {}
        self._last: dict[str, float] = {}

    def _host_lock(self, host: str) -> threading.Lock:
        with self._lock:
            return self._host_locks.setdefault(host, threading.Lock())

    def wait(self, host: str) -> None:
        if not self.delay_s:
            return
        with self._host_lock(host):
            last = self._last.get(host)
            if last is not None:
                remaining = self.delay_s - (time.monotonic() - last)
                if remaining > 0:
                    time.sleep(remaining)
            self._last[host] = time.monotonic()


def _describe(candidate: Candidate, technologies) -> str:
    kind = f"{candidate.industry} business" if candidate.industry else "Website"
    if technologies:
        return f"Real {kind} - {', '.join(technologies)}"
    return f"Real {kind}"


def failed_lead(candidate: Candidate, url: str, reason: str) -> Lead:
    return Lead(
        name=candidate.name or host_of(url).replace("www.", "") or url,
        website=url,
        location=candidate.location,
        industry=candidate.industry,
        signals=PageSignals.empty(),
        score=0,
        description=f"Scan failed: {reason}",
        error=reason,
    )


def analyze_candidate(
    candidate: Candidate,
    cfg: dict,
    tables: DetectorTables,
    profile: ScoringProfile,
    session=None,
) -> Lead:
    url = normalize_website(candidate.url)
    result = fetch(url, cfg, session=session)
    if not result.ok:
        logger.warning("Skipping analysis of %s: %s", url, result.reason)
        return failed_lead(candidate, url, result.reason)

    doc = parse(result.html)
    signals = detect(doc, tables)
    return Lead(
        name=candidate.name or extract_name_from_html(result.html, url),
        website=url,
        location=candidate.location,
        industry=candidate.industry,
        signals=signals,
        score=score(signals, profile),
        description=_describe(candidate, signals.technologies),
    )


def analyze_batch(
    candidates,
    cfg: dict,
    session=None,
    profile: ScoringProfile | None = None,
    cancel: threading.Event | None = None,
    throttle: HostThrottle | None = None,
) -> list[Lead]:
    """Analyze every candidate; returns leads in input order, unranked.

    Candidates not yet started when ``cancel`` is set produce no lead.
    """
    candidates = list(candidates)
    if not candidates:
        return []
    pcfg = cfg["pipeline"]
    tables = DetectorTables.from_config(cfg)
    profile = profile or get_profile(cfg["scoring"].get("profile", "standard"), cfg)
    throttle = throttle or HostThrottle(pcfg.get("request_delay_s", 0))
    slots: list[Lead | None] = [None] * len(candidates)

    def work(index: int, candidate: Candidate) -> None:
        if cancel is not None and cancel.is_set():
            return
        throttle.wait(host_of(normalize_website(candidate.url)))
        if cancel is not None and cancel.is_set():
            return
        try:
            slots[index] = analyze_candidate(candidate, cfg, tables, profile, session=session)
        except Exception as exc:
            logger.exception("Unexpected error analyzing %s", candidate.url)
            slots[index] = failed_lead(candidate, normalize_website(candidate.url), str(exc))

    workers = max(1, min(int(pcfg.get("max_workers", 4)), len(candidates)))
    logger.info("Analyzing %d candidates with %d workers", len(candidates), workers)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(work, i, c) for i, c in enumerate(candidates)]
        for future in futures:
            future.result()

    return [lead for lead in slots if lead is not None]


def rank_batch(leads, limit: int | None = None, rng: random.Random | None = None) -> list[Lead]:
    ranked = sort_and_rank(list(leads), rng)
    return ranked[:limit] if limit is not None else ranked


def run(
    candidates,
    cfg: dict,
    limit: int | None = None,
    session=None,
    rng: random.Random | None = None,
    cancel: threading.Event | None = None,
    throttle: HostThrottle | None = None,
) -> list[Lead]:
    leads = analyze_batch(candidates, cfg, session=session, cancel=cancel, throttle=throttle)
    return rank_batch(leads, limit=limit, rng=rng)


def analyze(url: str, cfg: dict, name: str | None = None, session=None) -> Lead:
    """Single-URL scan, scored with the ``scoring.scan_profile`` profile."""
    profile = get_profile(cfg["scoring"].get("scan_profile", "single_scan"), cfg)
    candidate = Candidate(url=url, name=name)
    try:
        return analyze_candidate(candidate, cfg, DetectorTables.from_config(cfg), profile, session=session)
    except Exception as exc:
        logger.exception("Unexpected error analyzing %s", url)
        return failed_lead(candidate, normalize_website(url), str(exc))


def calculate_stats(leads) -> dict:
    def position(lead):
        return lead.ranking.google_position if lead.ranking else None

    return {
        "total": len(leads),
        "withChat": sum(1 for l in leads if l.signals.has_chat),
        "withForm": sum(1 for l in leads if l.signals.has_form),
        "withContact": sum(1 for l in leads if l.signals.phones or l.signals.emails),
        "sponsored": sum(1 for l in leads if l.ranking and l.ranking.is_sponsored),
        "firstPage": sum(1 for l in leads if position(l) is not None and position(l) <= 8),
        "top3": sum(1 for l in leads if position(l) is not None and position(l) <= 3),
    }
