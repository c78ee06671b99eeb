"""Tests for running main.py straight from a checkout."""

import os
import subprocess
import sys
from pathlib import Path

MAIN = Path(__file__).resolve().parent.parent / "main.py"


def test_main_runs_without_install(tmp_path):
    (tmp_path / "clean.py").write_text("x = 1\n")
    env = {k: v for k, v in os.environ.items() if k != "PYTHONPATH"}

    result = subprocess.run(
        [sys.executable, str(MAIN), "check", "clean.py"],
        cwd=tmp_path,
        env=env,
        capture_output=True,
        text=True,
        timeout=120,
    )

    assert result.returncode == 0, result.stderr
    assert "clean.py: clean" in result.stdout
