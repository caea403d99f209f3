"""
ISSUANCE COST ENGINE
Fee and cost calculation for structured-finance issuance proposals
"""

from .models import IssuanceRequest
from .processor import CostProcessor, calculate_costs_from_dict, calculate_costs_from_json
from .rate_tables import RateTableSnapshot, load_rate_tables

__all__ = [
    'CostProcessor',
    'IssuanceRequest',
    'RateTableSnapshot',
    'load_rate_tables',
    'calculate_costs_from_dict',
    'calculate_costs_from_json',
]
