"""Constants shared across profilefit.

Configuration-file keywords, the fixed differential-evolution policy, and
default fit settings all live here.
"""

# === Configuration file grammar ===

X0_KEYWORD = "X0"
"""First token of the line that opens a function set"""

Y0_KEYWORD = "Y0"
"""First token of the line that must follow X0 in 2-D mode"""

FUNCTION_KEYWORD = "FUNCTION"
"""First token of a component declaration"""

FIXED_KEYWORD = "fixed"
"""Limit-spec token marking a parameter as held fixed"""

COMMENT_CHAR = "#"
"""Everything after this character on a line is ignored"""

LIMIT_SEPARATOR = ","
"""Separates lower and upper values in a limit-spec"""

# === Differential evolution policy ===

DE_POPULATION_FACTOR = 10
"""Population size = DE_POPULATION_FACTOR * number of parameters"""

DE_STRATEGY = "rand-to-best/1/exp"
"""Mutation/crossover strategy used by the driver"""

DE_WEIGHT = 0.85
"""Differential weighting factor F"""

DE_CROSSOVER = 1.0
"""Crossover probability CR"""

DE_REPORT_INTERVAL = 10
"""Generations between progress reports"""

# === Default fit settings ===

DEFAULT_ZERO_POINT = 0.0
"""Magnitude zero point used to convert mu (mag/arcsec^2) to intensity"""

DEFAULT_MAX_GENERATIONS = 600
"""Generation budget when neither config file nor command line sets one"""

SEED_ENV_VAR = "PROFILEFIT_SEED"
"""Environment variable supplying a default random seed"""
