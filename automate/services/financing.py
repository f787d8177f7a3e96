from automate.schemas.financing import FinancingRequest, FinancingResponse, RateRange

TAXES_AND_FEES_RATE = 0.10

# APR ranges (percent) by credit tier
SUGGESTED_RATES = {
    "excellent": RateRange(min=4.5, max=5.5, label="720+"),
    "good": RateRange(min=5.5, max=7.5, label="680-719"),
    "fair": RateRange(min=8.0, max=12.0, label="620-679"),
    "poor": RateRange(min=12.0, max=18.0, label="Below 620"),
}


def monthly_payment(principal: float, annual_rate_pct: float, months: int) -> float:
    """Standard amortized payment: P * r(1+r)^n / ((1+r)^n - 1)."""
    r = annual_rate_pct / 100 / 12
    if r == 0:
        return principal / months
    growth = (1 + r) ** months
    return principal * (r * growth) / (growth - 1)


def compute_loan(request: FinancingRequest) -> FinancingResponse:
    principal = request.vehicle_price - request.down_payment - request.trade_in_value
    payment = monthly_payment(principal, request.interest_rate, request.loan_term_months)
    total_payment = payment * request.loan_term_months
    total_interest = total_payment - principal
    taxes_and_fees = request.vehicle_price * TAXES_AND_FEES_RATE

    return FinancingResponse(
        principal=round(max(0, principal), 2),
        monthly_payment=round(max(0, payment), 2),
        total_payment=round(max(0, total_payment), 2),
        total_interest=round(max(0, total_interest), 2),
        estimated_taxes_and_fees=round(taxes_and_fees, 2),
        total_cost=round(
            request.vehicle_price + taxes_and_fees + total_interest - request.trade_in_value, 2
        ),
        suggested_rates=SUGGESTED_RATES,
    )
