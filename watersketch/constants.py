"""Scene-wide constants for the water sketch.

Values that users tune while the scene runs live in the parameter
definitions instead (see :mod:`watersketch.parameters`).
"""

# ---- canvas ----
CANVAS_WIDTH = 800
CANVAS_HEIGHT = 500
FPS = 30
TICK_HZ = 20          # server frame rate (20Hz = 50ms)

# Longest step the simulation integrates in one go. A stalled window must
# not teleport fish across the tank.
MAX_STEP = 0.1

# ---- motion ----
SPEED_SCALE = 30.0        # px/s per unit of the `speed` parameter
FLOW_SCALE = 18.0         # px/s of water drift per unit of `turbulence`
SEPARATION_FACTOR = 1.5   # neighbour radius as a multiple of fish length
TAIL_BEAT = 5.0           # rad/s of tail phase at rest
SPEED_FACTOR_RANGE = (0.75, 1.25)
SIZE_FACTOR_RANGE = (0.8, 1.25)
TURN_FREQ_RANGE = (0.4, 1.3)

# ---- water ----
WAVELENGTH = 240.0        # px covered by one unit of `wave_scale`
WATER_GRID = (48, 30)     # columns, rows sampled per frame
# (kx, ky, omega, amplitude) of the summed travelling waves
WAVES = (
    (1.0, 0.35, 1.1, 0.55),
    (-0.45, 1.0, 0.8, 0.3),
    (1.7, -1.2, 1.9, 0.15),
)

# ---- capture effect ----
RIPPLE_LIFETIME = 0.8     # seconds
RIPPLE_RADIUS = 40.0      # px at the end of its life

# ---- colours ----
BACKGROUND_COLOR = "#04263b"
WATER_CMAP = "Blues_r"
RIPPLE_COLOR = (0.85, 0.95, 1.0)
HUD_COLOR = "#e8f4ff"
FISH_SATURATION = 0.75
FISH_VALUE = 0.95
