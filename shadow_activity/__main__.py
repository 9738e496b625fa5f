"""
Run the CLI directly.

Usage:
    python -m shadow_activity run --dry-run
"""

from .main import main

if __name__ == "__main__":
    main()
