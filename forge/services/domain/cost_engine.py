"""
Domain service: Infrastructure cost estimation.
"""
import math
from typing import Union

from forge.domain.errors import ValidationError
from forge.domain.models import InfrastructureType


COST_PER_ACRE: dict[InfrastructureType, int] = {
    InfrastructureType.POLYHOUSE: 800_000,
    InfrastructureType.SHADE_NET: 400_000,
    InfrastructureType.OPEN_FIELD: 150_000,
}


def parse_infrastructure(value: Union[str, InfrastructureType]) -> InfrastructureType:
    """
    Resolve a category name to an InfrastructureType.

    Raises:
        ValidationError: If the value is not a recognised category
    """
    try:
        return InfrastructureType(value)
    except ValueError:
        valid = ", ".join(t.value for t in InfrastructureType)
        raise ValidationError(
            f"Invalid infrastructure type: {value!r} (expected one of {valid})"
        ) from None


def calculate_cost(area: float, infrastructure: Union[str, InfrastructureType]) -> int:
    """
    Cost of building the given infrastructure over an area.

    Args:
        area: Area in acres, must be >= 0
        infrastructure: One of the InfrastructureType categories

    Returns:
        Cost rounded to the nearest whole currency unit

    Raises:
        ValidationError: If the area is negative or not finite, or the
            category is unknown
    """
    if not math.isfinite(area):
        raise ValidationError("Area must be a finite number")
    if area < 0:
        raise ValidationError("Area must be >= 0")

    rate = COST_PER_ACRE[parse_infrastructure(infrastructure)]
    # Half-up rounding; built-in round() would round half to even
    return int(math.floor(area * rate + 0.5))
