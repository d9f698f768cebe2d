import re
from dataclasses import dataclass

from bs4 import BeautifulSoup, NavigableString


HIDDEN_TAGS = ("script", "style", "noscript", "template")


@dataclass
class Document:
    """Parsed page: the soup plus the views the detectors read."""

    raw: str
    soup: BeautifulSoup
    text: str
    forms: list
    scripts: list
    links: list

    def select(self, selector: str) -> list:
        return self.soup.select(selector)


def _visible_text(soup: BeautifulSoup) -> str:
    root = soup.body or soup
    parts = []
    for node in root.find_all(string=True):
        if node.parent is not None and node.parent.name in HIDDEN_TAGS:
            continue
        if type(node) is not NavigableString:
            continue
        parts.append(str(node))
    # inline tags split phrases and numbers; keep one space between words
    return re.sub(r"\s+", " ", " ".join(parts)).strip().lower()


def parse(html: str) -> Document:
    soup = BeautifulSoup(html or "", "html.parser")
    forms = [form.decode_contents().lower() for form in soup.find_all("form")]
    scripts = [(script.string or "", script.get("src") or "") for script in soup.find_all("script")]
    links = [link.get("href") or "" for link in soup.find_all("link")]
    return Document(
        raw=html or "",
        soup=soup,
        text=_visible_text(soup),
        forms=forms,
        scripts=scripts,
        links=links,
    )
