from fastapi import APIRouter, Depends, Query

from calc_engine.models.calculator import CalculationExplanation, CalculatorResult
from calc_engine.services.calculator import CalculatorService

router = APIRouter(prefix="/calc", tags=["calculator"])


def get_calculator_service() -> CalculatorService:
    return CalculatorService()


@router.get("", response_model=CalculatorResult)
async def evaluate_calculator_expression(
    query: str = Query(..., description="Arithmetic expression to evaluate."),
    service: CalculatorService = Depends(get_calculator_service),
) -> CalculatorResult:
    return service.evaluate(query)


@router.get("/explain", response_model=CalculationExplanation)
async def explain_calculator_expression(
    query: str = Query(..., description="Arithmetic expression to break down into tokens and postfix order."),
    service: CalculatorService = Depends(get_calculator_service),
) -> CalculationExplanation:
    return service.explain(query)
