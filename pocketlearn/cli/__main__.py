"""
Entry point for running pocketlearn as a module.

Usage:
    python -m pocketlearn.cli courses
    python -m pocketlearn.cli --help
"""
from .main import main

if __name__ == "__main__":
    main()
