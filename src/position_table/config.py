# Rows per page in the position table
PAGE_SIZE = 50

# Initial sort
DEFAULT_SORT_KEY = "position_id"
DEFAULT_SORT_DIR = "asc"

SORT_DIRECTIONS = ("asc", "desc")

# Derived key sorting on the city of a position's location
LOCATION_CITY_KEY = "location.city"

# Fields the free-text query is matched against
SEARCH_FIELDS = (
    "position_title",
    "position_id",
    "incumbent_name",
    "classification",
)
