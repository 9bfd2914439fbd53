"""
Shared pytest configuration.

Animations are rendered off-screen so the suite runs without a display.
"""

import matplotlib

matplotlib.use("Agg")
