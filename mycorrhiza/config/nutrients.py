"""Nutrient exchange configuration constants."""

EXCHANGE_BASE_CHANCE = 0.008  # Per hypha-root pair per tick, scaled by nutrients * moisture
EXCHANGE_MIN_MATURITY = 0.5  # Hypha maturity must exceed this to exchange

# Flow type selection from a single uniform draw
PHOSPHORUS_SHARE = 0.4  # draw < 0.4
CARBOHYDRATE_SHARE_END = 0.7  # 0.4 <= draw < 0.7, water above

# Where flows attach on the root, as a fraction of root length along y
PHOSPHORUS_TARGET_DEPTH = 0.5  # Root midpoint (exchange point)
CARBOHYDRATE_SOURCE_DEPTH = 0.3
WATER_TARGET_HEIGHT = 0.2  # Upper region of the root

# (min, max) ranges drawn uniformly per new flow
PHOSPHORUS_CONCENTRATION = (0.7, 1.0)
PHOSPHORUS_FLOW_RATE = (0.5, 1.0)
CARBOHYDRATE_CONCENTRATION = (0.5, 1.0)
CARBOHYDRATE_FLOW_RATE = (0.3, 0.7)
WATER_CONCENTRATION = (0.8, 1.0)
WATER_FLOW_RATE = (0.6, 1.0)

# Advancement
PROGRESS_SPEED = 1.2  # progress += flow_rate * dt * this
WOBBLE_XZ = 0.005
WOBBLE_Y = 0.002

# Exchange rate estimate
EXCHANGE_RATE_BASE = 0.1
EXCHANGE_RATE_MOISTURE_SATURATION = 0.8
