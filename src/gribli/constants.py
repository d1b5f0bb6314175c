GRID_ROWS = 8
GRID_COLS = 8

# Token kinds usable on the grid, in registry order.
TOKEN_KINDS = ("apple", "cherry", "lemon", "grape", "coconut", "peach")

# Shortest horizontal/vertical run that counts as a match.
MIN_RUN_LENGTH = 3

# Score for one round = raw matched tiles * POINTS_PER_TILE * chain index.
POINTS_PER_TILE = 10

# Once the next chain index reaches this value, one freshly spawned tile becomes a bomb.
BOMB_SPAWN_CHAIN = 4
# Blast radius around a bomb (1 -> 3x3 neighbourhood, clipped at the edges).
BOMB_RADIUS = 1

# Layout attempts when (re)building a board that must offer a legal move.
RESPAWN_MAX_ATTEMPTS = 200
