"""
Entry point for the area mesh service.

Running this script with ``python run.py`` starts the FastAPI server that
serves the area and layer APIs and, when present, the frontend.  The
application defined in ``backend/app/main.py`` is imported after adjusting
the Python path to include the repository root.

Set ``AREA_DEBUG=1`` for verbose per-ring diagnostics from the kernel.
"""

from __future__ import annotations

import sys
from pathlib import Path

import logging
import uvicorn

logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def main() -> None:
    """Run the Uvicorn server hosting the area mesh service."""
    # Put the repository root on sys.path so ``backend`` imports as a package.
    repo_root = Path(__file__).resolve().parent
    if str(repo_root) not in sys.path:
        sys.path.append(str(repo_root))

    from backend.app.main import app  # type: ignore

    # Bind to all interfaces on port 8000.
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
