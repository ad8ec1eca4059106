"""Session, population and plant layout configuration constants."""

# Playback
DEFAULT_SPEED = 1.0
MIN_SPEED = 0.1  # Control panel slider range
MAX_SPEED = 5.0
FRAME_RATE = 60
DEFAULT_TICK_SECONDS = 1.0 / FRAME_RATE

# Spore population: 12 spores at density 1.0, one more per 0.1 density
BASE_SPORE_COUNT = 12
SPORES_PER_DENSITY_UNIT = 10
REFERENCE_SPORE_DENSITY = 1.0

# Initial seeding
INITIAL_SPORE_SPREAD = 10.0  # x and z drawn from +/- half of this
INITIAL_SPORE_VIABILITY = (0.8, 1.0)
# Spores added when density increases
ADDED_SPORE_SPREAD = 12.0
ADDED_SPORE_VIABILITY = (0.7, 1.0)
SPORE_DEPTH_TOP = -1.0  # y drawn from [top, top + band]
SPORE_DEPTH_BAND = 0.5

# Plants added without a position
PLANT_SPREAD = 8.0
PLANT_LENGTH = (2.0, 4.0)
PLANT_SIZE = (0.06, 0.10)
PLANT_HEALTH = (0.7, 1.0)

# (id, (x, y, z), length, size, health) of the roots every session starts with
INITIAL_ROOT_LAYOUT = (
    ("root-1", (-2.0, 0.0, -1.0), 3.0, 0.1, 0.9),
    ("root-2", (1.0, 0.0, 2.0), 2.5, 0.08, 0.8),
    ("root-3", (-1.0, 0.0, 3.0), 2.0, 0.06, 0.7),
)

# Removing a plant purges nutrient flows attached within this radius of its exchange point
NUTRIENT_PURGE_RADIUS = 0.5

EXPORT_FILENAME_PREFIX = "amf-simulation"
