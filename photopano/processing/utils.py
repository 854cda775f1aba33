import math


def round_half_up(value: float) -> int:
    # round() in Python rounds halves to even; pixel offsets round .5 upwards
    return int(math.floor(value + 0.5))
