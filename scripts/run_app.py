#!/usr/bin/env python
"""
Run the Streamlit margin calculator.

Port and headless mode come from settings
(MARGIN_TOOL_APP_PORT, MARGIN_TOOL_APP_HEADLESS).

Usage:
    python scripts/run_app.py
"""
import os
import subprocess
import sys
from pathlib import Path


def build_command(settings, ui_path: Path) -> list[str]:
    """Streamlit command line for the calculator page."""
    return [
        sys.executable, '-m', 'streamlit', 'run', str(ui_path),
        '--server.port', str(settings.app_port),
        '--server.headless', 'true' if settings.app_headless else 'false',
    ]


def main():
    project_root = Path(__file__).parent.parent
    src_path = str(project_root / 'src')
    ui_path = project_root / 'src' / 'margin_tool' / 'ui' / 'app_streamlit.py'

    if not ui_path.exists():
        print(f"ERROR: UI module not found at {ui_path}")
        sys.exit(1)

    # Child process imports margin_tool from src
    env = os.environ.copy()
    if "PYTHONPATH" in env:
        env["PYTHONPATH"] = f"{src_path}{os.pathsep}{env['PYTHONPATH']}"
    else:
        env["PYTHONPATH"] = src_path
    sys.path.insert(0, src_path)

    from margin_tool.config.settings import get_settings
    settings = get_settings()

    cmd = build_command(settings, ui_path)
    print(f"Starting Margin Calculator on port {settings.app_port}...")

    try:
        subprocess.run(cmd, cwd=str(project_root), env=env)
    except KeyboardInterrupt:
        print("\nCalculator stopped.")


if __name__ == "__main__":
    main()
