"""Constants shared across the recommendation pipeline."""

# Requested category -> backing pool (table) name
CATEGORY_POOL_KEYS = {
    "pets": "adoptions",
    "articles": "articles",
}

# Requested category -> label used for preference hints in the query prompt
PREFERENCE_LABELS = {
    "pets": "species",
    "articles": "topics",
}

# Defaults
DEFAULT_TOP_K = 5
EMBEDDING_CACHE_TTL_SECONDS = 5 * 60

# Substituted for a zero similarity denominator
ZERO_NORM_EPSILON = 1e-12
