"""Wire mesh width selection endpoint."""

from fastapi import APIRouter

from stockcut.domain.services import calculate_consumption, select_width
from stockcut.domain.value_objects import LengthUnit
from stockcut.web.schemas.requests import WidthSelectRequest
from stockcut.web.schemas.responses import WidthSelectionSchema

router = APIRouter(prefix="/manufacturing/wire-mesh", tags=["wire-mesh"])


@router.post("/select-width", response_model=WidthSelectionSchema)
async def select_standard_width(request: WidthSelectRequest) -> WidthSelectionSchema:
    """Pick the narrowest standard roll width for a panel.

    With a panel length, the panel is turned when only its length fits
    across a roll. Responds 400 when no width can hold the panel.
    """
    unit = LengthUnit(request.unit.value)
    if request.required_length is None or not request.standard_widths:
        selection = select_width(request.required_width, request.standard_widths, unit)
        return WidthSelectionSchema.from_selection(selection)

    roll = calculate_consumption(
        request.required_width, request.required_length, request.standard_widths, unit
    )
    return WidthSelectionSchema.from_roll(roll)
