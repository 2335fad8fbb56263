from __future__ import annotations

"""Experience -> level conversion."""

import math

from . import config as s_cfg


def bedwars_level_from_exp(exp: float) -> float:
    """Return the level corresponding to the given experience.

    The fractional part is the progress towards the next level.
    """
    levels = math.floor(exp / s_cfg.PRESTIGE_EXP) * s_cfg.LEVELS_PER_PRESTIGE
    exp = exp % s_cfg.PRESTIGE_EXP

    # The first few levels of a prestige have their own costs
    for level in range(1, s_cfg.EASY_LEVELS + 1):
        cost = s_cfg.EASY_LEVEL_COSTS[level]
        if exp < cost:
            break
        levels += 1
        exp -= cost

    levels += math.floor(exp / s_cfg.LEVEL_COST)
    exp = exp % s_cfg.LEVEL_COST

    next_level = (levels + 1) % s_cfg.LEVELS_PER_PRESTIGE
    next_level_cost = s_cfg.EASY_LEVEL_COSTS.get(next_level, s_cfg.LEVEL_COST)

    return levels + exp / next_level_cost
