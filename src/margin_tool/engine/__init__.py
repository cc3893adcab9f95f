"""Engine subpackage - pricing field derivation."""
from .calculator import derive, derivation_basis, has_enough_info
from .models import PricingRecord, labour_defaults, purchases_defaults

__all__ = [
    'derive', 'derivation_basis', 'has_enough_info',
    'PricingRecord', 'labour_defaults', 'purchases_defaults',
]
