#!/usr/bin/env python
"""
Run the Detail Pricing API.

Usage:
    python scripts/run_api.py [--port 8000] [--data-dir path/to/catalog]
"""
import argparse
import os
import subprocess
import sys
from pathlib import Path

DATA_DIR_ENV = 'DETAIL_PRICING_DATA_DIR'


def main():
    parser = argparse.ArgumentParser(description="Run the Detail Pricing API")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    parser.add_argument("--port", "-p", type=int, default=8000, help="Port (default: 8000)")
    parser.add_argument("--data-dir", "-d", default=None,
                        help=f"Catalog CSV directory (default: ${DATA_DIR_ENV} or ./data)")
    parser.add_argument("--no-reload", action="store_true", help="Disable auto-reload")
    args = parser.parse_args()

    project_root = Path(__file__).parent.parent
    os.chdir(project_root)

    # Ensure src is in python path
    env = os.environ.copy()
    src_path = str(project_root / "src")
    if "PYTHONPATH" in env:
        env["PYTHONPATH"] = f"{src_path}{os.pathsep}{env['PYTHONPATH']}"
    else:
        env["PYTHONPATH"] = src_path

    if args.data_dir:
        data_dir = Path(args.data_dir).resolve()
        if not data_dir.is_dir():
            print(f"ERROR: catalog directory not found at {data_dir}")
            sys.exit(1)
        env[DATA_DIR_ENV] = str(data_dir)

    cmd = [
        sys.executable, "-m", "uvicorn",
        "detail_pricing.api.main:app",
        "--host", args.host,
        "--port", str(args.port),
    ]
    if not args.no_reload:
        cmd.append("--reload")

    print(f"Starting Detail Pricing API on {args.host}:{args.port} "
          f"(catalog: {env.get(DATA_DIR_ENV, project_root / 'data')})")
    try:
        subprocess.run(cmd, env=env)
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
