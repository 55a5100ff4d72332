import argparse
from pathlib import Path

from .env import load_env

from . import __version__
from .annotator import find_issue_tokens
from .commands import COMMAND_NAME, IssueAnnotatorApp
from .host import ConsoleNotifier, FileVault, JsonSettingsStore

DEFAULT_SETTINGS_PATH = ".issueannotator/settings.json"


def build_app(vault_dir: str, settings_path: str, active_file: str | None = None) -> IssueAnnotatorApp:
    vault = FileVault(Path(vault_dir), active=Path(active_file).resolve() if active_file else None)
    return IssueAnnotatorApp(vault, ConsoleNotifier(), JsonSettingsStore(Path(settings_path)))


def cmd_fetch(args: argparse.Namespace) -> None:
    app = build_app(args.vault, args.settings, args.file)
    app.on_load(create_sample=not args.no_sample)
    result = app.fetch_issue_details()
    if result is not None:
        print(f"Issues: {len(result.tokens)}")
        print(f"Inserted: {result.inserted}")


def cmd_scan(args: argparse.Namespace) -> None:
    input_path = Path(args.file)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    with input_path.open("r", encoding="utf-8") as f:
        text = f.read()
    tokens = find_issue_tokens(text)
    if not tokens:
        print("No issue tokens found.")
        return
    print(f"Found {len(tokens)} issue tokens:")
    for raw, _ in tokens:
        print(f" - {raw}")


def cmd_sample(args: argparse.Namespace) -> None:
    app = build_app(args.vault, args.settings)
    app.load_settings()
    if not app.create_sample_note():
        print("Sample note already exists.")


def cmd_config(args: argparse.Namespace) -> None:
    app = build_app(".", args.settings)
    stored = app.update_settings(
        api_token=args.token,
        host=args.host,
        notice_duration_ms=args.notice_duration,
        error_notice_duration_ms=args.error_notice_duration,
    )
    print(f"Settings: {args.settings}")
    print(f"  API token: {stored.masked_token()}")
    print(f"  Host: {stored.host or '(not set)'}")
    print(f"  Notice duration: {stored.notice_duration_ms} ms")
    print(f"  Error notice duration: {stored.error_notice_duration_ms} ms")


def main():
    # Load .env if present (YOUTRACK_API_TOKEN, YOUTRACK_HOST)
    load_env()
    parser = argparse.ArgumentParser(prog="issueannotator", description="Annotate notes with YouTrack issue titles")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    fet = subparsers.add_parser("fetch", help=f"{COMMAND_NAME}: insert issue titles beneath #PROJECT-NUMBER tokens")
    fet.add_argument("--file", help="Note to annotate (the active document)")
    fet.add_argument("--vault", default=".", help="Vault directory (default: .)")
    fet.add_argument("--settings", default=DEFAULT_SETTINGS_PATH, help=f"Settings JSON (default: {DEFAULT_SETTINGS_PATH})")
    fet.add_argument("--no-sample", action="store_true", help="Do not create the sample note")
    fet.set_defaults(func=cmd_fetch)

    scn = subparsers.add_parser("scan", help="List issue tokens in a note without contacting the tracker")
    scn.add_argument("--file", required=True, help="Note to scan")
    scn.set_defaults(func=cmd_scan)

    smp = subparsers.add_parser("sample", help="Create the sample note if it does not exist")
    smp.add_argument("--vault", default=".", help="Vault directory (default: .)")
    smp.add_argument("--settings", default=DEFAULT_SETTINGS_PATH, help=f"Settings JSON (default: {DEFAULT_SETTINGS_PATH})")
    smp.set_defaults(func=cmd_sample)

    cfg = subparsers.add_parser("config", help="Update and show settings")
    cfg.add_argument("--settings", default=DEFAULT_SETTINGS_PATH, help=f"Settings JSON (default: {DEFAULT_SETTINGS_PATH})")
    cfg.add_argument("--token", help="YouTrack API token (or set YOUTRACK_API_TOKEN)")
    cfg.add_argument("--host", help="YouTrack host, e.g. example.youtrack.cloud (or set YOUTRACK_HOST)")
    cfg.add_argument("--notice-duration", help="Notice duration in ms (default 3000)")
    cfg.add_argument("--error-notice-duration", help="Error notice duration in ms (default 5000)")
    cfg.set_defaults(func=cmd_config)

    args = parser.parse_args()

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
