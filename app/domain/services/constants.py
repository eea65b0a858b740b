# Constants for the comparison and ranking engine.

# Comparison views
VIEW_BASIC = "basic"
VIEW_DETAILED = "detailed"
VIEW_VISUAL = "visual"
VIEW_MATRIX = "matrix"
VIEW_RECOMMENDATIONS = "recommendations"

# Max number of ids accepted per view, and the message bound to that cap
MAX_IDS = {
    VIEW_BASIC: 10,
    VIEW_DETAILED: 10,
    VIEW_VISUAL: 6,           # frontend layout
    VIEW_MATRIX: 8,           # feature matrix
    VIEW_RECOMMENDATIONS: 10,
}
TOO_MANY_MESSAGES = {
    VIEW_BASIC: "Maximum 10 products can be compared at once",
    VIEW_DETAILED: "Maximum 10 products can be compared at once",
    VIEW_VISUAL: "Maximum 6 products can be compared visually",
    VIEW_MATRIX: "Maximum 8 products can be compared in matrix view",
    VIEW_RECOMMENDATIONS: "Maximum 10 products can be analyzed for recommendations",
}

# Visual layout switches from table to grid above this many columns
VISUAL_TABLE_MAX_COLUMNS = 3

# Price buckets: Budget < 500 <= Mid-range < 1000 <= Premium
PRICE_BUDGET_BELOW = 500
PRICE_PREMIUM_FROM = 1000

# Rating buckets
RATING_EXCELLENT = 4.5
RATING_GOOD = 4.0
RATING_AVERAGE = 3.5

# Value recommendation thresholds
BEST_VALUE_MIN_RATING = 4.5
BEST_VALUE_MAX_PRICE = 1000
GOOD_VALUE_MIN_RATING = 4.0
GOOD_VALUE_MAX_PRICE = 800

# valueScore = rating / price * VALUE_SCALE
VALUE_SCALE = 1000

# Recommendations
RECOMMENDATION_LIMIT = 3
DEFAULT_CRITERIA = ("value", "rating", "price")

NOT_AVAILABLE = "N/A"
