#!/usr/bin/env python3
"""
Simple runner script for the form spam classifier.

Usage:
    python run.py submission.json
    cat submission.json | python run.py

Or make executable:
    chmod +x run.py
    ./run.py submission.json
"""

import sys
from pathlib import Path

# Add src to path for imports
src_path = Path(__file__).parent / "src"
sys.path.insert(0, str(src_path))

from formguard import main

if __name__ == "__main__":
    sys.exit(main())
