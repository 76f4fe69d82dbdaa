# Priority tiers (ascending = removed first)
TIER_VACANT = 0      # never ranked; vacant positions are excluded from the pool
TIER_SUNSET = 1      # sunset-funded
TIER_TEMPORARY = 2   # term, casual, student, assignment, secondment
TIER_STANDARD = 3    # indeterminate, non-sunset
TIER_CRITICAL = 4    # critical overrides every other tier

# Reduction target ceiling and default (percent of the occupied pool)
MAX_REDUCTION_PCT = 100
DEFAULT_REDUCTION_PCT = 5
