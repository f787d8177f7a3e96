from pydantic import Field

from automate.schemas.common import CamelModel


class FinancingRequest(CamelModel):
    vehicle_price: float = Field(ge=0)
    down_payment: float = Field(default=0, ge=0)
    trade_in_value: float = Field(default=0, ge=0)
    loan_term_months: int = Field(default=60, gt=0)
    interest_rate: float = Field(default=6.5, ge=0)  # APR, percent


class RateRange(CamelModel):
    min: float
    max: float
    label: str


class FinancingResponse(CamelModel):
    principal: float
    monthly_payment: float
    total_payment: float
    total_interest: float
    estimated_taxes_and_fees: float
    total_cost: float
    suggested_rates: dict[str, RateRange]
