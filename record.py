#!/usr/bin/env python3
"""
Convenience entry point for headless recording.

Usage:
    python record.py --frames 600                     # Orbit only
    python record.py --frames 900 --morph-at 200      # Morph onto the default primitive
    python record.py --list                           # List all recordings
"""

from tools.record import main

if __name__ == "__main__":
    main()
