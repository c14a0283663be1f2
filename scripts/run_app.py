#!/usr/bin/env python
"""
Run the Streamlit quote builder.

Usage:
    python scripts/run_app.py [--data-dir path/to/catalog]
"""
import argparse
import os
import subprocess
import sys
from pathlib import Path

DATA_DIR_ENV = 'DETAIL_PRICING_DATA_DIR'


def main():
    parser = argparse.ArgumentParser(description="Run the Streamlit quote builder")
    parser.add_argument("--data-dir", "-d", default=None,
                        help=f"Catalog CSV directory (default: ${DATA_DIR_ENV} or ./data)")
    args = parser.parse_args()

    project_root = Path(__file__).parent.parent
    ui_path = project_root / 'src' / 'detail_pricing' / 'ui' / 'app_streamlit.py'

    if not ui_path.exists():
        print(f"ERROR: UI module not found at {ui_path}")
        sys.exit(1)

    env = os.environ.copy()
    if args.data_dir:
        data_dir = Path(args.data_dir).resolve()
        if not data_dir.is_dir():
            print(f"ERROR: catalog directory not found at {data_dir}")
            sys.exit(1)
        env[DATA_DIR_ENV] = str(data_dir)

    cmd = [sys.executable, '-m', 'streamlit', 'run', str(ui_path)]
    print(f"Starting Streamlit: {' '.join(cmd)}")
    print(f"Catalog: {env.get(DATA_DIR_ENV, project_root / 'data')}")

    try:
        subprocess.run(cmd, cwd=str(project_root), env=env)
    except KeyboardInterrupt:
        print("\nApplication stopped.")


if __name__ == "__main__":
    main()
