from __future__ import annotations

from pathlib import Path


def test_required_package_paths_exist() -> None:
    root = Path(__file__).resolve().parents[1]
    required = [
        "src/fortune_cookie/cli.py",
        "src/fortune_cookie/strfile.py",
        "src/fortune_cookie/config.py",
        "src/fortune_cookie/index/__init__.py",
        "src/fortune_cookie/cookies/__init__.py",
        "src/fortune_cookie/selection/__init__.py",
        "src/fortune_cookie/logging/__init__.py",
    ]
    for rel in required:
        assert (root / rel).exists(), rel
