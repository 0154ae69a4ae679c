"""Module entry point for python -m closet_rental."""

from __future__ import annotations

from closet_rental.app import main


if __name__ == "__main__":
    raise SystemExit(main())
