from copy import deepcopy
from pathlib import Path
import os
import yaml


DEFAULT_CONFIG = {
    "app": {
        "host": "127.0.0.1",
        "port": 3000,
        "log_level": "INFO",
        "max_leads": 20,
        "sample_leads": 12,
    },
    "fetch": {
        "timeout_s": 15,
        "max_redirects": 5,
        "headers": {
            "User-Agent": (
                "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
                "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
            ),
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
            "Connection": "keep-alive",
        },
    },
    "pipeline": {
        "request_delay_s": 2.0,
        "max_workers": 4,
    },
    "scoring": {
        "profile": "standard",
        "scan_profile": "single_scan",
        "profiles": {},
    },
    "detectors": {
        "chat_markers": [
            "chat",
            "intercom",
            "drift",
            "livechat",
            "tawk",
            "olark",
            "purechat",
            "zendesk",
            "helpcrunch",
            "crisp",
            "hubspot",
        ],
        "chat_phrases": ["live chat", "chat now", "online chat", "start chatting"],
        "chat_script_marker": "chat",
        "form_vocabulary": [
            "contact",
            "email",
            "phone",
            "name",
            "consult",
            "appointment",
            "message",
            "submit",
            "quote",
        ],
        "email_denylist": ["noreply", "no-reply", "spam", "test", "@email.com"],
        "email_placeholder_labels": ["example"],
        "technologies": {
            "WordPress": ["wp-content", "wp-includes", "wordpress"],
            "Shopify": ["shopify.com", "shopify"],
            "Wix": ["wix.com"],
            "Squarespace": ["squarespace.com"],
            "React": ["react", "react-dom"],
            "jQuery": ["jquery"],
            "Google Analytics": ["google-analytics", "ga.js"],
            "Facebook Pixel": ["facebook-pixel", "fbq"],
            "HubSpot": ["hubspot"],
        },
        "max_phones": 3,
        "max_emails": 3,
        "max_technologies": 5,
    },
    "industries": {},
}


def deep_merge(base: dict, override: dict) -> dict:
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(path: str | None = None) -> dict:
    cfg = deepcopy(DEFAULT_CONFIG)
    if path:
        p = Path(path)
        if p.exists():
            data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
            deep_merge(cfg, data)

    env_port = os.getenv("LEADSCAN_PORT", "")
    if env_port:
        cfg["app"]["port"] = int(env_port)
    env_level = os.getenv("LEADSCAN_LOG_LEVEL", "")
    if env_level:
        cfg["app"]["log_level"] = env_level.upper()

    return cfg
