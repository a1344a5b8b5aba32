from __future__ import annotations

import sys
from pathlib import Path

from setuptools import setup

APP = ["src/ccost/app.py"]
RESOURCES_DIR = Path("src/ccost/assets")

VERSION = "0.1.0"
if (Path(__file__).parent / "pyproject.toml").exists():
    try:
        import tomllib  # type: ignore[attr-defined]
    except ModuleNotFoundError:  # pragma: no cover - fallback for Python <3.11
        try:
            import tomli as tomllib  # type: ignore
        except ModuleNotFoundError:  # pragma: no cover - optional dependency
            tomllib = None  # type: ignore
    if tomllib is not None:
        try:
            with (Path(__file__).parent / "pyproject.toml").open("rb") as handle:
                data = tomllib.load(handle)
            VERSION = data.get("project", {}).get("version", VERSION)
        except (OSError, ValueError):  # pragma: no cover - best effort
            pass

OPTIONS = {
    "argv_emulation": False,
    "plist": {
        "LSUIElement": True,
        "CFBundleName": "Claude Cost",
        "CFBundleIdentifier": "com.ccost.menubar",
        "CFBundleShortVersionString": VERSION,
        "CFBundleVersion": VERSION,
    },
    "resources": [str(RESOURCES_DIR)] if RESOURCES_DIR.exists() else [],
}

if "py2app" in sys.argv:  # pragma: no cover - used only during app builds
    setup(
        app=APP,
        options={"py2app": OPTIONS},
        setup_requires=["py2app>=0.28"],
    )
else:
    setup()
