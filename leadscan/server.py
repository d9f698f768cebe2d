import logging
import os
import random
import time
from datetime import datetime, timezone

from flask import Flask, Response, jsonify, request

from .config import load_config
from .log import configure_logging
from .models import Lead, ValidationError
from .pipeline import analyze, analyze_batch, calculate_stats, rank_batch
from .sources.industries import industry_candidates, search_query
from .sources.samples import generate_sample_leads
from .utils import leads_to_csv


logger = logging.getLogger(__name__)


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")
    return data


def _require(data: dict, *keys: str) -> None:
    missing = [k for k in keys if not isinstance(data.get(k), str) or not data[k].strip()]
    if missing:
        raise ValidationError(f"Missing or non-string field(s): {', '.join(missing)}")


def create_app(cfg: dict | None = None, session=None, rng: random.Random | None = None) -> Flask:
    app = Flask(__name__)
    app.config["LEADSCAN"] = cfg or load_config(os.getenv("LEADSCAN_CONFIG", "config.yaml"))

    def conf() -> dict:
        return app.config["LEADSCAN"]

    @app.errorhandler(ValidationError)
    def bad_request(exc):
        return jsonify({"success": False, "error": str(exc)}), 400

    @app.get("/")
    def index():
        html = """
<!doctype html>
<html lang="en">
  <head><meta charset="utf-8" /><title>Lead Scan</title></head>
  <body>
    <h1>Lead Scan</h1>
    <p>POST /api/scan-url {"url"} or /api/scan-industry {"industry", "location"}.</p>
  </body>
</html>
        """.strip()
        return Response(html, mimetype="text/html")

    @app.get("/api/health")
    def health():
        return jsonify(
            {
                "status": "OK",
                "service": "leadscan",
                "features": ["Website scanning", "Chat detection", "Form detection", "Contact extraction", "CSV export"],
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        )

    @app.post("/api/scan-url")
    def scan_url():
        data = _json_body()
        _require(data, "url")
        try:
            lead = analyze(data["url"], conf(), name=data.get("name"), session=session)
        except Exception as exc:
            logger.exception("Scan setup failed for %s", data["url"])
            return jsonify({"success": False, "error": str(exc)}), 500
        return jsonify({"success": True, "lead": lead.to_dict()})

    @app.post("/api/scan-industry")
    def scan_industry():
        data = _json_body()
        _require(data, "industry", "location")
        industry = data["industry"].strip().lower()
        location = data["location"].strip()
        cfg = conf()
        logger.info("Starting scan: %s in %s", industry, location)
        try:
            real = analyze_batch(industry_candidates(industry, location, cfg), cfg, session=session)
            samples = generate_sample_leads(industry, location, int(cfg["app"].get("sample_leads", 12)), rng)
            leads = rank_batch(real + samples, limit=int(cfg["app"].get("max_leads", 20)), rng=rng)
        except Exception as exc:
            logger.exception("Scan failed: %s in %s", industry, location)
            return jsonify({"success": False, "error": str(exc)}), 500

        logger.info("Scan completed: %d leads (%d real)", len(leads), len(real))
        return jsonify(
            {
                "success": True,
                "leads": [lead.to_dict() for lead in leads],
                "stats": calculate_stats(leads),
                "scanInfo": {
                    "industry": industry,
                    "location": location,
                    "query": search_query(industry, location, cfg, data.get("customQuery")),
                    "realScans": len(real),
                    "totalLeads": len(leads),
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                },
            }
        )

    @app.post("/api/debug-scan")
    def debug_scan():
        data = _json_body()
        _require(data, "industry", "location")
        leads = rank_batch(generate_sample_leads(data["industry"], data["location"], 3, rng), rng=rng)
        return jsonify(
            {
                "sampleLead": leads[0].to_dict(),
                "allLeads": [lead.to_dict() for lead in leads],
                "stats": calculate_stats(leads),
            }
        )

    @app.post("/api/export-csv")
    def export_csv():
        data = _json_body()
        raw = data.get("leads")
        if not isinstance(raw, list):
            return jsonify({"error": "Invalid leads data"}), 400
        leads = [Lead.from_dict(item) for item in raw]
        industry = data.get("industry") or "all"
        filename = f"leads-{industry}-{int(time.time() * 1000)}.csv"
        return Response(
            leads_to_csv(leads),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    return app


def main():
    cfg = load_config(os.getenv("LEADSCAN_CONFIG", "config.yaml"))
    configure_logging(cfg["app"].get("log_level", "INFO"))
    app = create_app(cfg)
    app.run(host=cfg["app"]["host"], port=int(cfg["app"]["port"]), debug=False)


if __name__ == "__main__":
    main()
