"""Default configuration values."""

MAGIC = "B$"  # fragment magic
HEADER_LENGTH = 8  # magic(2) + encoding(1) + type(1) + total(2) + index(2)
MAX_PARTS = 36 * 36 - 1  # largest count two base36 digits can carry ("ZZ")
DEFAULT_MAX_PARTS = MAX_PARTS  # decoder ceiling on a declared total
DEFAULT_FRAGMENT_LENGTH = 400  # body chars per fragment, header excluded
ZLIB_LEVEL = 9
ZLIB_WBITS = -10  # raw deflate, 1 KiB window
INFLATE_WBITS = -15  # accept any raw deflate window
DEFAULT_FPS = 4
DEFAULT_GRID_ROWS = 1
DEFAULT_GRID_COLS = 1
DEFAULT_ERROR_LEVEL = "l"
DEFAULT_BORDER = 2  # QR border modules
DEFAULT_SCALE = 8  # pixels per module when rendering QR
DEFAULT_GAP = 12  # pixels between QR cells
DEFAULT_COLOR_FG = 0  # black
DEFAULT_COLOR_BG = 255  # white
