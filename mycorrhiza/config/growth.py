"""Growth engine configuration constants."""

# Germination
GERMINATION_MOISTURE_THRESHOLD = 0.2  # Soil moisture must exceed this to germinate
GERMINATION_VIABILITY_THRESHOLD = 0.3  # Spore viability must exceed this
GERMINATION_NUTRIENT_THRESHOLD = 0.2
GERMINATION_BASE_CHANCE = 0.008  # Per tick, before environmental factors
GERMINATION_COLONIZATION_BONUS = 0.01  # Added per unit of colonization rate
INITIAL_DIRECTION_JITTER = 0.3  # Per-axis noise on the direction toward the nearest root
NO_ROOT_DOWNWARD_BIAS = 0.5

# Extension
BASE_GROWTH_SPEED = 0.8  # Units per second at growth rate 1.0
MIN_MOISTURE_FACTOR = 0.4  # Growth never slows below this fraction for dry soil
MIN_NUTRIENT_FACTOR = 0.4
MATURITY_SPEED_BONUS = 0.3
MATURATION_RATE = 0.03  # Maturity gained per second
SEGMENT_SPACING = 0.08  # Tip must move this far from the last committed segment to commit
MIN_SEGMENTS = 3  # Below this every tick commits a segment
LENGTH_NUTRIENT_BONUS = 0.3  # Max length scales by (1 + nutrients * this)

# Steering
ROOT_ATTRACTION_RADIUS = 4.0
ROOT_ATTRACTION_SOFTENING = 0.1  # Added to distance before the falloff power
ROOT_ATTRACTION_FALLOFF = 1.5
DIRECTION_BLEND = 0.2  # Lerp factor toward the root attraction
STEERING_JITTER_XZ = 0.03
STEERING_JITTER_Y = 0.02

# Environmental factors applied to the new tip
DRY_SOIL_THRESHOLD = 0.3  # Below this the tip sags downward
DRY_SOIL_SAG = 0.02
RICH_SOIL_THRESHOLD = 0.8  # Above this the tip picks up a small enrichment wobble
RICH_SOIL_WOBBLE_XZ = 0.01
RICH_SOIL_WOBBLE_Y = 0.005

# Root connection
CONNECTION_RANGE_MULTIPLIER = 1.5  # Tip must be within connection_distance * this

# Branching
BRANCH_MIN_SEGMENTS = 12  # Segment count must exceed this
BRANCH_SEGMENT_INTERVAL = 15  # Only every Nth segment is a branching opportunity
BRANCH_MIN_MATURITY = 0.6
BRANCH_BASE_CHANCE = 0.001
BRANCH_MATURITY_BONUS = 0.3
BRANCH_NUTRIENT_BONUS = 0.2
BRANCH_ANGLE_SPREAD = 0.3  # Child direction turns up to +/- this * pi about the vertical
BRANCH_MATURITY_INHERITANCE = 0.7
