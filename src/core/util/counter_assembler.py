import logging
from typing import Sequence

from core.model.measurement import Counter
from core.util.data_decoder import get_float, get_t2, get_t3, powf_float32, to_float32

logger = logging.getLogger("CounterAssembler")


def coarse_value(mantissa: int, exp: int) -> float:
    """mantissa * 10^exp, with the exponent cast to float and raised with a floating point power."""
    return to_float32(to_float32(float(mantissa)) * powf_float32(10.0, float(exp)))


def fine_value(raw_x10: Sequence[int]) -> float:
    """Counter register that holds the value multiplied by 10."""
    return to_float32(to_float32(float(get_t3(raw_x10))) / 10.0)


def assemble_counter(
    raw_exp: Sequence[int],
    raw_mantissa: Sequence[int],
    raw_x10: Sequence[int],
    raw_float: Sequence[int],
) -> Counter:
    """
    Build a Counter from its four independently read register blocks.

    The representations are not compared with each other; a mismatch between
    ``val``, ``x10`` and ``float`` is left for the consumer to judge.
    """
    exp = get_t2(raw_exp)
    mantissa = get_t3(raw_mantissa)
    counter = Counter(
        exp=exp,
        mantissa=mantissa,
        val=coarse_value(mantissa, exp),
        x10=fine_value(raw_x10),
        float=get_float(raw_float),
    )
    logger.debug(f"Counter assembled: {counter}")
    return counter
