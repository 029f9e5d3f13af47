from __future__ import annotations

from typing import Annotated

from pydantic import Field
from pydantic.functional_validators import AfterValidator


# 크레딧/금액은 소수점 둘째 자리까지만 의미를 갖는다.
AMOUNT_PRECISION = 2


def round_amount(value: float) -> float:
    """금액/크레딧 값을 소수점 둘째 자리로 반올림한다."""

    return round(float(value), AMOUNT_PRECISION)


Amount = Annotated[float, AfterValidator(round_amount)]

NonNegativeAmount = Annotated[float, Field(ge=0), AfterValidator(round_amount)]
