"""
Marketing budget calculator.

Lead targets, CPL assumptions and customer value in; annual lead volumes,
channel budgets and ROI out.
"""

__version__ = "1.0.0"
