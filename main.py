#!/usr/bin/env python3
"""ApneaTrainer — entry point.

Run with:
    python main.py
    python -m apneatrainer
"""

from apneatrainer.__main__ import main


if __name__ == "__main__":
    main()
