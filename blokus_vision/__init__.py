"""
Blokus Board Colour Recognition
===============================

Detects the colour of every tile on a photographed Blokus board.

Architecture:
    1. Sampling        – pixelated 20×20 board image → one RGB sample per tile
    2. Lab conversion  – samples mapped to CIE L*a*b* (D65)
    3. Clustering      – seeded k-means with one cluster per tile colour
    4. Board           – 20 rows of R/G/B/Y/W tags + converged centres
"""

__version__ = "1.0.0"
