from __future__ import annotations

"""Leveling model constants.

A prestige is a cycle of 100 levels. The first few levels after every
prestige are cheaper than the rest; every other level costs the flat
LEVEL_COST.
"""

LEVELS_PER_PRESTIGE: int = 100

# Exp required to level up once past the easy levels.
LEVEL_COST: int = 5000

# Exp required for levels 1..4 of every prestige, in order.
EASY_LEVEL_COSTS: dict[int, int] = {1: 500, 2: 1000, 3: 2000, 4: 3500}

EASY_LEVELS: int = len(EASY_LEVEL_COSTS)
EASY_EXP: int = sum(EASY_LEVEL_COSTS.values())

# Exp required to complete one prestige (487000).
PRESTIGE_EXP: int = EASY_EXP + (LEVELS_PER_PRESTIGE - EASY_LEVELS) * LEVEL_COST
