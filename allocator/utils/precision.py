from allocator.constants import WEIGHT_SCALE


def share_of(total: int, weight: int) -> int:
    # truncating division keeps every share an exact number of units
    return total * weight // WEIGHT_SCALE
