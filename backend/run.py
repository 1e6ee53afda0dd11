#!/usr/bin/env python3
"""
Start the consolidator server.

    python run.py [--host HOST] [--port PORT] [--no-browser] [--reload]

The banner shows the URL as a terminal QR code so a phone on the same
network can open it.
"""

import argparse
import io
import webbrowser

import qrcode
import uvicorn

from consolidator.config import Settings, load_settings
from consolidator.logging_setup import configure_logging, get_logger

logger = get_logger("consolidator.run")


def qr_text(url: str) -> str:
    """Render url as an ASCII QR code."""
    qr = qrcode.QRCode(border=1, box_size=1,
                       error_correction=qrcode.constants.ERROR_CORRECT_L)
    qr.add_data(url)
    qr.make(fit=True)
    out = io.StringIO()
    qr.print_ascii(out=out, invert=True)
    return out.getvalue()


def banner(url: str, settings: Settings) -> str:
    rule = "=" * 50
    lines = [rule, "  Statement Consolidator", rule,
             f"  URL:      {url}", f"  Database: {settings.database_path}", ""]
    try:
        lines.append(qr_text(url))
    except (ValueError, OSError):
        logger.warning("Could not render QR code for %s", url)
    lines += ["  Press Ctrl+C to stop the server", rule]
    return "\n".join(lines)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Statement Consolidator server")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to run on")
    parser.add_argument("--no-browser", action="store_true", help="Don't open a browser")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    settings = load_settings()
    configure_logging(settings.log_level)

    url = f"http://{args.host}:{args.port}"
    print(banner(url, settings))

    if not args.no_browser:
        webbrowser.open(f"{url}/docs")

    uvicorn.run(
        "consolidator.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
