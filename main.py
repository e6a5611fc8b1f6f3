#!/usr/bin/env python3
"""Make Homer Proud entry point.

Run with:
    python main.py
    python -m homerproud
"""

from homerproud.__main__ import main


if __name__ == "__main__":
    main()
