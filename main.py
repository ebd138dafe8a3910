#!/usr/bin/env python3
"""
Battle Simulator - terminal edition

Thin wrapper around :mod:`battlesim.cli`. The battle rules live in
``battlesim.battle``; this entry point only starts the terminal front-end.

To run: python main.py
"""

from battlesim.cli import run

if __name__ == "__main__":
    run()
