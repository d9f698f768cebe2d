"""
Heuristic detectors over a parsed page.

Every detector reads a ``Document`` and the vocabularies in ``DetectorTables``
and returns plain values; a missing match is an empty/false result, never an
error. Tables are built once from config and passed in.
"""

from dataclasses import dataclass
from types import MappingProxyType

from .models import PageSignals
from .parse import Document
from .utils import extract_emails, extract_phones


@dataclass(frozen=True)
class DetectorTables:
    chat_selectors: tuple
    chat_phrases: tuple
    chat_script_marker: str
    form_vocabulary: tuple
    email_denylist: tuple
    email_placeholder_labels: tuple
    technologies: MappingProxyType
    max_phones: int = 3
    max_emails: int = 3
    max_technologies: int = 5

    @classmethod
    def from_config(cls, cfg: dict) -> "DetectorTables":
        det = cfg["detectors"]
        selectors = []
        for marker in det.get("chat_markers") or []:
            selectors.append(f'[class*="{marker}"]')
            selectors.append(f'[id*="{marker}"]')
        techs = {name: tuple(sigs) for name, sigs in (det.get("technologies") or {}).items()}
        return cls(
            chat_selectors=tuple(selectors),
            chat_phrases=tuple(p.lower() for p in det.get("chat_phrases") or []),
            chat_script_marker=(det.get("chat_script_marker") or "chat").lower(),
            form_vocabulary=tuple(w.lower() for w in det.get("form_vocabulary") or []),
            email_denylist=tuple(det.get("email_denylist") or []),
            email_placeholder_labels=tuple(det.get("email_placeholder_labels") or []),
            technologies=MappingProxyType(techs),
            max_phones=int(det.get("max_phones", 3)),
            max_emails=int(det.get("max_emails", 3)),
            max_technologies=int(det.get("max_technologies", 5)),
        )


def detect_chat(doc: Document, tables: DetectorTables) -> bool:
    if any(doc.select(selector) for selector in tables.chat_selectors):
        return True
    if any(phrase in doc.text for phrase in tables.chat_phrases):
        return True
    marker = tables.chat_script_marker
    return any(marker in inline.lower() or marker in src.lower() for inline, src in doc.scripts)


def count_forms(doc: Document, tables: DetectorTables) -> tuple[int, int]:
    """Return (all forms, contact-intent forms)."""
    contact = sum(
        1 for markup in doc.forms if any(word in markup for word in tables.form_vocabulary)
    )
    return len(doc.forms), contact


def detect_technologies(doc: Document, tables: DetectorTables) -> list[str]:
    srcs = [src for _, src in doc.scripts if src] + [href for href in doc.links if href]
    detected = []
    for tech, signatures in tables.technologies.items():
        for sig in signatures:
            if sig in doc.raw or any(sig in ref for ref in srcs):
                detected.append(tech)
                break
        if len(detected) >= tables.max_technologies:
            break
    return detected


def detect(doc: Document, tables: DetectorTables) -> PageSignals:
    forms_count, contact_forms_count = count_forms(doc, tables)
    return PageSignals(
        has_chat=detect_chat(doc, tables),
        has_form=contact_forms_count > 0,
        has_any_form=forms_count > 0,
        phones=tuple(extract_phones(doc.text, limit=tables.max_phones)),
        emails=tuple(
            extract_emails(
                doc.text,
                tables.email_denylist,
                limit=tables.max_emails,
                placeholder_labels=tables.email_placeholder_labels,
            )
        ),
        technologies=tuple(detect_technologies(doc, tables)),
        forms_count=forms_count,
        contact_forms_count=contact_forms_count,
    )
