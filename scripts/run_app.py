"""
CLI script to launch the Streamlit search interface.

Usage:
    python scripts/run_app.py                          # Default port 8501
    python scripts/run_app.py --port 8502              # Custom port
    python scripts/run_app.py --config my/config.json  # Custom config
"""

import argparse
import os
import subprocess
import sys
from pathlib import Path
from typing import Dict, List, Tuple

sys.path.insert(0, str(Path(__file__).parent.parent))

from jsonsearch.core import get_config, Config, ConfigurationError
from jsonsearch.core.config_loader import CONFIG_ENV_VAR, reload_config

PROJECT_ROOT = Path(__file__).parent.parent
APP_PATH = PROJECT_ROOT / "jsonsearch" / "gui" / "app.py"


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Launch the transcript search web interface"
    )
    parser.add_argument("--port", type=int, default=8501,
                        help="Port to run the application on (default: 8501)")
    parser.add_argument("--host", type=str, default="localhost",
                        help="Host to bind to (default: localhost)")
    parser.add_argument("--config", type=str,
                        help="Path to custom config.json file")
    parser.add_argument("--no-browser", action="store_true",
                        help="Don't open browser automatically")
    return parser.parse_args()


def resolve_config(config_arg: str = None) -> Tuple[Config, Dict[str, str]]:
    """
    Load the configuration and the environment for the Streamlit process.

    The app runs in a child process, so a custom config file is handed
    over through the environment variable read by get_config().
    """
    env = dict(os.environ)
    if not config_arg:
        return get_config(), env

    config_path = Path(config_arg).resolve()
    config = reload_config(config_path)
    env[CONFIG_ENV_VAR] = str(config_path)
    return config, env


def streamlit_command(host: str, port: int, headless: bool) -> List[str]:
    cmd = [
        sys.executable, "-m", "streamlit", "run", str(APP_PATH),
        "--server.port", str(port),
        "--server.address", host,
    ]
    if headless:
        cmd += ["--server.headless", "true"]
    return cmd


def main():
    """Main entry point for launching the app."""
    args = parse_args()

    try:
        config, env = resolve_config(args.config)
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}")
        sys.exit(1)

    print(f"Index database: {config.paths.database_path}")
    if not config.paths.database_path.exists():
        print("No index yet, searches return nothing until scripts/run_indexer.py has run")
    print(f"Serving {config.gui.page_title} on http://{args.host}:{args.port} (Ctrl+C to stop)")

    try:
        subprocess.run(
            streamlit_command(args.host, args.port, args.no_browser),
            cwd=str(PROJECT_ROOT),
            env=env
        )
    except KeyboardInterrupt:
        print("\nShutting down...")
    except FileNotFoundError:
        print("Error: Streamlit not found. Install with: pip install streamlit")
        sys.exit(1)


if __name__ == "__main__":
    main()
