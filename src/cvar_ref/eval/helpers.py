from __future__ import annotations

import math

from ..types import Value

def is_truthy(val: Value) -> bool:
    # NaN and "no value" are falsy alongside zero
    if val is None or math.isnan(val):
        return False
    return val != 0
