import argparse


def build_common_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(add_help=False)
    ap.add_argument("--config", default=None, help="Path to engine YAML (default conf/engine.yaml)")
    ap.add_argument("--log-level", default=None, help="Override logging level (DEBUG, INFO, ...)")
    ap.add_argument("--log-file", default=None, help="Also write logs to this rotating file")
    ap.add_argument("--assets-root", default=None, help="Public asset root for existence checks")
    ap.add_argument("--no-asset-check", action="store_true", help="Skip asset existence checks")
    return ap


def overrides_from_args(args: argparse.Namespace) -> dict:
    """Translate common CLI flags into a config override mapping."""
    out: dict = {}
    if getattr(args, "log_level", None):
        out.setdefault("logging", {})["level"] = args.log_level
    if getattr(args, "log_file", None):
        out.setdefault("logging", {})["log_file"] = args.log_file
    if getattr(args, "assets_root", None):
        out.setdefault("assets", {})["root"] = args.assets_root
    if getattr(args, "no_asset_check", False):
        out.setdefault("assets", {})["check_exists"] = False
    if getattr(args, "workers", None):
        out.setdefault("render", {})["workers"] = args.workers
    return out
