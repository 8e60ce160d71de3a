#!/usr/bin/env python3
"""Launch the Finwise Streamlit app.

Usage: ``python run_finwise.py [streamlit options]``.  Extra arguments are
passed to ``streamlit run`` unchanged, e.g. ``--server.port 8600``.
"""

import os
import subprocess
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.resolve()
APP_PATH = PROJECT_ROOT / "finwise" / "Home.py"


def build_command(argv):
    return [sys.executable, "-m", "streamlit", "run", str(APP_PATH), *argv]


def main(argv=None):
    argv = sys.argv[1:] if argv is None else list(argv)
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(PROJECT_ROOT), env.get("PYTHONPATH")]))
    completed = subprocess.run(build_command(argv), cwd=PROJECT_ROOT, env=env)
    return completed.returncode


if __name__ == "__main__":
    sys.exit(main())
