import argparse
import json
import sys
from pathlib import Path

from .config import load_config
from .log import configure_logging
from .models import Lead, ValidationError
from .pipeline import analyze, analyze_batch, calculate_stats, rank_batch
from .sources.industries import industry_candidates
from .sources.samples import generate_sample_leads
from .utils import write_csv


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Website signal extraction and lead scoring")
    sub = parser.add_subparsers(dest="command", required=True)

    p_url = sub.add_parser("scan-url", help="Analyze a single website")
    p_url.add_argument("url")
    p_url.add_argument("--name", default=None, help="Known business name")
    p_url.add_argument("--config", default="config.yaml")

    p_ind = sub.add_parser("scan-industry", help="Scan known websites for an industry and rank them")
    p_ind.add_argument("industry")
    p_ind.add_argument("location")
    p_ind.add_argument("--limit", type=non_negative_int, default=None, help="Max leads (default: app.max_leads)")
    p_ind.add_argument("--no-samples", action="store_true", help="Do not mix in demo leads")
    p_ind.add_argument("--export", default="", help="Also write the leads to this CSV path")
    p_ind.add_argument("--config", default="config.yaml")

    p_export = sub.add_parser("export", help="Convert a JSON lead list to CSV")
    p_export.add_argument("--in", dest="src", required=True, help="JSON file with a 'leads' array")
    p_export.add_argument("--out", required=True, help="CSV output path")
    p_export.add_argument("--config", default="config.yaml")

    p_cfg = sub.add_parser("print-config", help="Print merged config")
    p_cfg.add_argument("--config", default="config.yaml")

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--config", default="config.yaml")

    return parser


def _load_leads(path: str) -> list[Lead]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    raw = data.get("leads") if isinstance(data, dict) else None
    if not isinstance(raw, list):
        raise ValidationError(f"{path}: expected an object with a 'leads' array")
    return [Lead.from_dict(item) for item in raw]


def main(argv=None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    cfg = load_config(args.config)
    configure_logging(cfg["app"].get("log_level", "INFO"))

    if args.command == "scan-url":
        lead = analyze(args.url, cfg, name=args.name)
        print(json.dumps(lead.to_dict(), indent=2))
        return

    if args.command == "scan-industry":
        real = analyze_batch(industry_candidates(args.industry, args.location, cfg), cfg)
        samples = [] if args.no_samples else generate_sample_leads(
            args.industry, args.location, int(cfg["app"].get("sample_leads", 12))
        )
        limit = args.limit if args.limit is not None else int(cfg["app"].get("max_leads", 20))
        leads = rank_batch(real + samples, limit=limit)
        print(json.dumps({"leads": [l.to_dict() for l in leads], "stats": calculate_stats(leads)}, indent=2))
        if args.export:
            write_csv(args.export, leads)
            print(f"Exported CSV to {args.export}", file=sys.stderr)
        return

    if args.command == "export":
        try:
            leads = _load_leads(args.src)
        except ValidationError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(2)
        write_csv(args.out, leads)
        print(f"Exported CSV to {args.out}")
        return

    if args.command == "print-config":
        import yaml
        print(yaml.safe_dump(cfg, sort_keys=False))
        return

    if args.command == "serve":
        from .server import create_app
        app = create_app(cfg)
        app.run(host=cfg["app"]["host"], port=int(cfg["app"]["port"]), debug=False)
        return

    parser.print_help()
    sys.exit(2)


if __name__ == "__main__":
    main()
