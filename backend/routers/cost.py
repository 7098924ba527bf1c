import logging
import math

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from core.cost_calculator import CostBreakdown, calculate_cost_breakdown, display_cost
from db.database import get_async_session
from routers.cocktails import get_cocktail_or_404, log_skipped_rows
from schemas.cost import CostBreakdownRead, CostRequest, LineCostRead, SkippedUsageRead

logger = logging.getLogger(__name__)

router = APIRouter()


def _finite(value: float) -> float:
    # JSON has no NaN or infinity
    return value if math.isfinite(value) else 0.0


def serialize_breakdown(breakdown: CostBreakdown) -> CostBreakdownRead:
    return CostBreakdownRead(
        total=_finite(breakdown.total),
        display_total=display_cost(breakdown.total),
        lines=[
            LineCostRead(
                index=line.index,
                name=line.name,
                amount=line.amount,
                unit=line.unit,
                basis=line.basis,
                unit_price=_finite(line.unit_price),
                cost=_finite(line.cost),
            )
            for line in breakdown.lines
        ],
        skipped=[
            SkippedUsageRead(index=s.index, name=s.name, unit=s.unit, reason=s.reason.value)
            for s in breakdown.skipped
        ],
    )


@router.post("/calculate", response_model=CostBreakdownRead)
async def calculate(request: CostRequest):
    """Estimate the cost of an ad-hoc list of ingredient usages"""
    usages = [u.to_usage() for u in (request.usages or [])]
    breakdown = calculate_cost_breakdown(usages)
    if breakdown.skipped:
        logger.info(
            "Cost request: %d of %d row(s) skipped (%s)",
            len(breakdown.skipped),
            len(usages),
            ", ".join(s.reason.value for s in breakdown.skipped),
        )
    return serialize_breakdown(breakdown)


@router.get("/cocktails/{cocktail_id}", response_model=CostBreakdownRead)
async def cocktail_cost(cocktail_id: UUID, db: AsyncSession = Depends(get_async_session)):
    """Cost breakdown of a stored cocktail"""
    cocktail = await get_cocktail_or_404(db, cocktail_id)
    log_skipped_rows(cocktail)
    return serialize_breakdown(cocktail.cost_breakdown)
