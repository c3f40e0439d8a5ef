"""
Personalised workout plan generation with Claude AI.
"""

__version__ = "1.0.0"
