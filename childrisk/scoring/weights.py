# childrisk/scoring/weights.py

"""
Centralized survey factor -> weight mapping.

This file must NOT import from any other scoring modules.
Weights sum to 1.0. Income, water and sanitation are "higher = better"
inputs and are inverted (100 - value) before weighting.
"""

CHILD_AGE_WEIGHT = 0.1
HOUSEHOLD_INCOME_WEIGHT = 0.3
FOOD_INSECURITY_WEIGHT = 0.4
WATER_ACCESS_WEIGHT = 0.1
SANITATION_ACCESS_WEIGHT = 0.1

# Ceiling the inverted scores are measured against.
SCORE_CEILING = 100
