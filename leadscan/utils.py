import csv
import io
import re
from pathlib import Path
from urllib.parse import urlparse
from bs4 import BeautifulSoup


EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
PHONE_RE = re.compile(r"(?<!\d)(?:\+?1[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}(?!\d)")

CSV_COLUMNS = [
    "Name",
    "Website",
    "Location",
    "Lead Score",
    "Live Chat",
    "Contact Form",
    "Phone Numbers",
    "Email Addresses",
    "Description",
    "Analysis Date",
]


def normalize_website(url: str | None) -> str:
    if not url:
        return ""
    url = url.strip()
    if not url:
        return ""
    if not url.startswith(("http://", "https://")):
        url = "https://" + url
    return url.rstrip("/")


def host_of(url: str) -> str:
    return (urlparse(url).hostname or "").lower()


def _unique(items, limit: int) -> list[str]:
    unique = []
    for item in items:
        if item not in unique:
            unique.append(item)
        if len(unique) >= limit:
            break
    return unique


def normalize_phone(raw: str) -> str | None:
    digits = re.sub(r"\D", "", raw)
    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]
    return digits if len(digits) == 10 else None


def extract_phones(text: str, limit: int = 3) -> list[str]:
    found = (normalize_phone(m) for m in PHONE_RE.findall(text or ""))
    return _unique((p for p in found if p), limit)


def _label_pattern(labels):
    # a label is the whole local part or a whole dot/@-delimited domain label
    alternatives = "|".join(re.escape(label.lower()) for label in labels if label)
    return re.compile(rf"(?:^|[@.])(?:{alternatives})[@.]") if alternatives else None


def extract_emails(text: str, denylist=(), limit: int = 3, placeholder_labels=()) -> list[str]:
    deny = [d.lower() for d in denylist]
    labels = _label_pattern(placeholder_labels)

    def allowed(email: str) -> bool:
        if any(d in email for d in deny):
            return False
        return labels is None or not labels.search(email)

    found = (m.lower() for m in EMAIL_RE.findall(text or ""))
    return _unique((e for e in found if allowed(e)), limit)


def extract_name_from_html(html: str, url: str = "") -> str:
    soup = BeautifulSoup(html, "html.parser")
    if soup.title and soup.title.get_text(strip=True):
        return soup.title.get_text(strip=True)[:200]
    el = soup.find("h1")
    if el and el.get_text(strip=True):
        return el.get_text(strip=True)[:200]
    if url:
        return host_of(url).replace("www.", "")
    return ""


def ensure_parent_dir(path: str) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def _csv_row(lead) -> dict:
    s = lead.signals
    return {
        "Name": lead.name,
        "Website": lead.website,
        "Location": lead.location or "",
        "Lead Score": lead.score,
        "Live Chat": "Yes" if s.has_chat else "No",
        "Contact Form": "Yes" if s.has_form else "No",
        "Phone Numbers": "; ".join(s.phones),
        "Email Addresses": "; ".join(s.emails),
        "Description": lead.description or "",
        "Analysis Date": lead.analyzed_at.date().isoformat(),
    }


def leads_to_csv(leads) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=CSV_COLUMNS, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writeheader()
    for lead in leads:
        writer.writerow(_csv_row(lead))
    return buf.getvalue()


def write_csv(path: str, leads) -> None:
    ensure_parent_dir(path)
    with open(path, "w", newline="", encoding="utf-8") as f:
        f.write(leads_to_csv(leads))
