COLS, ROWS = 10, 20

LINES_PER_LEVEL = 20
SCORE_TABLE = (0, 40, 100, 300, 1200)   # indexed by rows cleared in one lock, times level

# Smallest gravity period once the level curve bottoms out
MIN_TICK_SECONDS = 0.001

CONFIG = {
    "CELL_SIZE": 32,
    "DAS_MS": 150,
    "ARR_MS": 50,
    "LOCK_DELAY_MS": 500,
    "LOCK_RENEWALS": 4,
    "CLEAR_DELAY_MS": 400,
    "SHAKE_MS": 200,
    "SEED": None,
}
