"""
Margin Tool Package

Default margin calculator for labour and purchases pricing.
Derives cost, markup, profit, charge and margin from cost plus one known field.
"""

__version__ = "1.0.0"
