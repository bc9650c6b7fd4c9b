# Color scheme based on https://clrs.cc/

navy    = "#001f3f"
blue    = "#0074d9"
aqua    = "#7fdbff"
teal    = "#39cccc"
olive   = "#3d9970"
green   = "#2ecc40"
lime    = "#00ee66"
yellow  = "#ffbb00"
orange  = "#ff851b"
red     = "#ff4136"
fuchsia = "#f012be"
purple  = "#b10dc9"
maroon  = "#85144b"
white   = "#ffffff"
silver  = "#dddddd"
gray    = "#aaaaaa"
black   = "#111111"

rainbow = (
    navy, blue, aqua, teal, olive, green, lime, yellow, orange, red, maroon, fuchsia, purple
)

MAIN_COLOR = "#ff3333"
DEVELOPMENT_COLOR = "#009000"
STAGING_COLOR = "#d7d700"
STASH_COLOR = white

CONVENTIONAL_BRANCH_COLORS = {
    "master": MAIN_COLOR,
    "main": MAIN_COLOR,
    "development": DEVELOPMENT_COLOR,
    "develop": DEVELOPMENT_COLOR,
    "dev": DEVELOPMENT_COLOR,
    "stage": STAGING_COLOR,
    "staging": STAGING_COLOR,
    "production": STAGING_COLOR,
}


def stringHashCode(text: str) -> int:
    """
    Signed 32-bit string hash (s[0]*31^(n-1) + ... + s[n-1]).
    Unlike hash(), this is stable across interpreter runs.
    """
    h = 0
    for c in text:
        h = (31 * h + ord(c)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


def branchColor(name: str, palette=rainbow) -> str:
    try:
        return CONVENTIONAL_BRANCH_COLORS[name]
    except KeyError:
        return palette[abs(stringHashCode(name)) % len(palette)]
