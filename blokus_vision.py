"""
Root entry point – delegates to the blokus_vision package.

Usage:
    python blokus_vision.py classify --image cropped/28.09.2022.png
    python blokus_vision.py seeds
"""

from blokus_vision.main import main

if __name__ == "__main__":
    main()
