"""Filament length to mass conversion."""

import math

# 1.75 mm PLA
PLA_DENSITY = 1.25  # g/cm³
PLA_RADIUS = 0.175 / 2.0  # cm


def meters_to_grams(meters: float) -> float:
    """Convert a filament length in meters to grams.

    Treats the filament as a cylinder: pi * r^2 * length, times density.
    """
    cm = meters * 100.0
    volume = math.pi * PLA_RADIUS**2 * cm
    return volume * PLA_DENSITY


def millimeters_to_grams(millimeters: float) -> float:
    """Convert a filament length in millimeters (as reported by the printer) to grams."""
    return meters_to_grams(millimeters / 1000.0)
