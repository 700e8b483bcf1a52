"""Entry point for the orrery software rasterizer."""
from __future__ import annotations

from orrery.app import main


if __name__ == "__main__":
    main()
