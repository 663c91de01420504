"""Pure domain services for stock cutting.

- demand: Flattens order requirements into per-material demand lists
- width_selector: Chooses standard roll widths for wire mesh panels
- plan_assembler: Builds cutting plans with procurement totals and weights
"""

from .demand import DemandKey, collect_profile_demand, collect_roll_demand
from .plan_assembler import (
    PlanAssembler,
    WeightLookup,
    pipe_weight,
    summarize_pipes,
)
from .width_selector import calculate_consumption, plan_rolls, select_width

__all__ = [
    "DemandKey",
    "PlanAssembler",
    "WeightLookup",
    "calculate_consumption",
    "collect_profile_demand",
    "collect_roll_demand",
    "pipe_weight",
    "plan_rolls",
    "select_width",
    "summarize_pipes",
]
