from typing import List

from pydantic import BaseModel, Field


class CalculatorResult(BaseModel):
    expression: str = Field(..., description="The arithmetic expression that was evaluated.")
    result: float = Field(..., description="The evaluated numerical result.")


class CalculationExplanation(CalculatorResult):
    normalized: str = Field(..., description="The expression after whitespace, separator and bracket normalization.")
    tokens: List[str] = Field(default_factory=list, description="Lexemes in input (infix) order.")
    postfix: List[str] = Field(default_factory=list, description="Lexemes in Reverse Polish order.")
