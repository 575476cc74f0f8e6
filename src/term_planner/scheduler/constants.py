"""Constants for period planning."""

# Solver labels reported in result metadata
SOLVER_GREEDY = "criticalPathGreedy"
SOLVER_HYBRID = "hybridExactFirst"
SOLVER_MIP = "mipMinPeriods"
SOLVER_ORACLE = "oracleExact"
SOLVER_ENTRYPOINT = "scheduleEntrypoint"

# Greedy per-period subset search budget (milliseconds)
DEFAULT_PERIOD_SEARCH_TIME_LIMIT_MS = 100

# Budget used when another solver bootstraps its upper bound from the greedy
DEFAULT_GREEDY_BOOTSTRAP_TIME_LIMIT_MS = 80
ORACLE_GREEDY_BOOTSTRAP_TIME_LIMIT_MS = 20

# Hybrid exact-first defaults
DEFAULT_HYBRID_TIMEOUT_MS = 2_500
DEFAULT_MIN_HORIZON_SLICE_MS = 50
DEFAULT_MAX_HORIZON_SLICE_MS = 120

# MIP defaults
DEFAULT_MIP_TIMEOUT_MS = 4_900
MIN_MIP_TIME_LIMIT_SECONDS = 0.05
# CP-SAT only accepts integer objective coefficients
PENALTY_SCALE = 1_000

# Oracle defaults
DEFAULT_ORACLE_TIMEOUT_MS = 5_000
DEFAULT_MAX_CLASSES_FOR_EXACT = 14

# Soft constraint weights (per mismatched block / per Saturday option)
DEFAULT_PENALTY_WEIGHTS = {
    "timePreference": 5,
    "saturday": 3,
}

SATURDAY_ALIASES = frozenset({"sabado", "saturday"})

# Time-of-day windows by block start, in minutes since midnight: (from, until)
NOON = 12 * 60
TIME_PREFERENCE_WINDOWS = {
    "morning": (0, NOON),
    "afternoon": (NOON, 18 * 60),
    "evening": (18 * 60, 24 * 60),
    "night": (20 * 60, 24 * 60),
    "afternoon_or_night": (NOON, 24 * 60),
}

# Synthetic curriculum defaults
GENERATOR_DAYS = ["Lunes", "Martes", "Miercoles", "Jueves", "Viernes"]
GENERATOR_TIME_SLOTS = [
    (8 * 60, 10 * 60),
    (10 * 60, 12 * 60),
    (14 * 60, 16 * 60),
    (16 * 60, 18 * 60),
    (18 * 60, 20 * 60),
]
