"""
Central location for constant values and tables used by the rotation engine.
"""

# Minimum events before the rotation quality score means anything.
QUALITY_MIN_EVENTS = 3

# Number of recent events looked at by the quick rotation check.
VALIDATION_WINDOW = 5

# A 7-day average gap between reuses of the same site earns a full recovery score.
RECOVERY_TARGET_DAYS = 7.0

# Using two-thirds of the catalog already maxes site diversity.
DIVERSITY_SCALE = 1.5

# Quality factor weights (sum to 1.0)
QUALITY_WEIGHTS = {
    "Site Diversity": 0.30,
    "Side Alternation": 0.25,
    "Body-Part Distribution": 0.25,
    "Recovery Time": 0.20,
}

# Rating buckets, checked top-down: (minimum score, rating value)
RATING_THRESHOLDS = [
    (85, "Excellent"),
    (70, "Good"),
    (50, "Fair"),
]

# Feedback table
# Format: {factor name: {band: text}} with band in positive (>=80), neutral (>=50), corrective
FACTOR_FEEDBACK = {
    "Site Diversity": {
        "positive": "Great variety of injection sites.",
        "neutral": "Decent variety. Try adding a few sites you rarely use.",
        "corrective": "Too few sites in use. Spread injections across more of the available sites.",
    },
    "Side Alternation": {
        "positive": "Left and right sides are alternating well.",
        "neutral": "Sides alternate most of the time. Switch sides after every injection.",
        "corrective": "Same side used repeatedly. Alternate between left and right.",
    },
    "Body-Part Distribution": {
        "positive": "Injections are evenly spread across body parts.",
        "neutral": "Some body parts get more use than others.",
        "corrective": "One body part carries most injections. Balance use across body parts.",
    },
    "Recovery Time": {
        "positive": "Sites get plenty of time to recover between uses.",
        "neutral": "Recovery time is acceptable. A few more days between reuses would help.",
        "corrective": "Sites are reused too quickly. Give each site about a week to recover.",
    },
}
