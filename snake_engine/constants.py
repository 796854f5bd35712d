"""Game constants."""

BOARD_SIZE = 20
BASE_SPEED = 150  # ms between ticks
FOOD_OFFSET = 5
FOOD_SAMPLE_ATTEMPTS = 500

# (threshold, interval): scanned from the lowest threshold, first score above it wins.
SPEED_TABLE = [
    (5, 130),
    (8, 100),
    (12, 100),
    (16, 90),
    (18, 90),
    (22, 70),
    (26, 70),
    (30, 50),
]

# (d_row, d_col)
DIRECTIONS = {
    "UP": (-1, 0),
    "RIGHT": (0, 1),
    "DOWN": (1, 0),
    "LEFT": (0, -1),
}
OPPOSITES = {"UP": "DOWN", "DOWN": "UP", "LEFT": "RIGHT", "RIGHT": "LEFT"}

KEY_DIRECTIONS = {
    "ArrowUp": "UP",
    "ArrowRight": "RIGHT",
    "ArrowDown": "DOWN",
    "ArrowLeft": "LEFT",
    "w": "UP",
    "d": "RIGHT",
    "s": "DOWN",
    "a": "LEFT",
}
RESET_KEYS = {"Enter"}

HOST = "0.0.0.0"
PORT = 8765
