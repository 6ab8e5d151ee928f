"""Exhibit Guide — dev launcher. Starts the API, or runs the description backfill once."""

import argparse
import asyncio
import logging
import os
import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).parent
load_dotenv(ROOT / ".env")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = os.getenv("PORT", "13013")


def _backfill(data_dir: Path | None) -> int:
    from exhibit_guide.config import Settings, build_provider
    from exhibit_guide.generation import run_backfill
    from exhibit_guide.llm import ConfigurationError
    from exhibit_guide.storage import Storage

    settings = Settings.from_env()
    if data_dir:
        settings.data_dir = data_dir
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )

    try:
        report = asyncio.run(run_backfill(
            catalog=Storage(settings.data_dir),
            provider=build_provider(settings),
            delay=settings.backfill_delay,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
        ))
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"{report.message}: processed={report.processed} "
          f"successful={report.successful} failed={report.failed}")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Exhibit Guide dev launcher")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help="Data storage directory (default: ./data)")
    parser.add_argument("--backfill", action="store_true",
                        help="Generate missing descriptions for the whole catalog and exit")
    parser.add_argument("--reload", action="store_true",
                        help="Restart the server when source files change")
    args = parser.parse_args()

    if args.backfill:
        sys.exit(_backfill(args.data_dir))

    # Build env for the server so it picks up the same data dir
    env = os.environ.copy()
    if args.data_dir:
        env["DATA_DIR"] = str(args.data_dir.resolve())

    cmd = ["uvicorn", "exhibit_guide.app:app", "--host", HOST, "--port", PORT,
           "--log-level", env.get("LOG_LEVEL", "info").lower()]
    if args.reload:
        cmd.append("--reload")

    print(f"Starting API on http://localhost:{PORT} ...")
    proc = subprocess.Popen(cmd, cwd=ROOT, env=env)
    try:
        proc.wait()
    except KeyboardInterrupt:
        print("\nShutting down...")
        proc.terminate()
        proc.wait()


if __name__ == "__main__":
    main()
