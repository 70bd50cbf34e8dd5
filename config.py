"""
RideCalc Configuration Settings
"""
import logging
import os

# Application Settings
APP_NAME = "RideCalc Field Calculator"
VERSION = "1.0.0"

# Calculator Settings
DEFAULT_DECIMAL_PLACES = 2
# Interactive display keeps at least this many fractional digits so
# intermediate results are not rounded before commit
MIN_DISPLAY_FRACTION_DIGITS = 6
ERROR_DISPLAY = "Error"

# Logging
LOG_LEVEL = getattr(logging, os.environ.get("RIDECALC_LOG_LEVEL", "INFO").upper(), logging.INFO)
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Display Settings (popup sized like a phone keypad)
WINDOW_WIDTH = 420
WINDOW_HEIGHT = 620
POPUP_WIDTH = 360
POPUP_HEIGHT = 560
DISPLAY_FONT = ("Consolas", 24, "bold")   # LCD/segmented-style font
TAPE_FONT = ("Consolas", 10)
BUTTON_FONT = ("Segoe UI", 12)
LABEL_FONT = ("Segoe UI", 11)

# ── Neumorphic Palettes ────────────────────────────────────────────────────────

# LIGHT palette  – soft sage-green background
NEU_LIGHT = {
    "bg":           "#DDE6ED",   # base surface
    "bg_dark":      "#C8D4DF",   # slightly darker variant (inset feel)
    "shadow_dark":  "#B2BFC8",   # outset shadow – dark side
    "shadow_lite":  "#FFFFFF",   # outset shadow – light side
    "display_bg":   "#C8D4DF",   # display inner area
    "display_fg":   "#1A2332",   # high-contrast dark text (LCD dark on light)
    "btn_bg":       "#DDE6ED",
    "btn_fg":       "#2B3A4A",
    "operator_fg":  "#1E7A56",   # teal-green accent
    "equals_bg":    "#2E8B57",   # sea-green confirm
    "equals_fg":    "#FFFFFF",
    "special_fg":   "#6B3FA0",   # parens, percent, sign
    "memory_fg":    "#2C5F8A",   # muted blue
    "accent":       "#2E8B57",
    "text":         "#2B3A4A",
    "subtext":      "#6E8090",
    "success":      "#2E8B57",
    "danger":       "#B03A2E",
    "hdr_bg":       "#C8D4DF",
    "entry_bg":     "#E8EEF4",
    "entry_fg":     "#1A2332",
    "listbox_bg":   "#C8D4DF",
    "listbox_fg":   "#1A2332",
}

# DARK palette  – deep slate with green accents
NEU_DARK = {
    "bg":           "#1E2530",
    "bg_dark":      "#161C26",
    "shadow_dark":  "#10161E",
    "shadow_lite":  "#283040",
    "display_bg":   "#161C26",
    "display_fg":   "#9ADDB0",   # soft green glow – LCD green-on-dark
    "btn_bg":       "#1E2530",
    "btn_fg":       "#BDD0E0",
    "operator_fg":  "#4DB888",
    "equals_bg":    "#2D8A58",
    "equals_fg":    "#FFFFFF",
    "special_fg":   "#B48EE0",
    "memory_fg":    "#5E8FC8",
    "accent":       "#4DB888",
    "text":         "#BDD0E0",
    "subtext":      "#4E6070",
    "success":      "#4DB888",
    "danger":       "#E55A4E",
    "hdr_bg":       "#161C26",
    "entry_bg":     "#283040",
    "entry_fg":     "#BDD0E0",
    "listbox_bg":   "#161C26",
    "listbox_fg":   "#9ADDB0",
}


def get_theme(dark: bool) -> dict:
    """Return the active neumorphic colour palette."""
    return NEU_DARK if dark else NEU_LIGHT


# Host fields shown by the GUI and seeded into the web API
# (name, label, decimal places)
DEFAULT_FIELDS = [
    ("start_mileage", "Start Mileage", 1),
    ("end_mileage", "End Mileage", 1),
    ("gas_price", "Gas Price", 3),
    ("gross_earnings", "Gross Earnings", 2),
    ("tips", "Tips", 2),
    ("tolls", "Tolls", 2),
]

# Settings file for GUI preferences (dark mode)
SETTINGS_FILE = os.path.join(os.path.dirname(__file__), "settings.json")

# Web Portal settings
WEB_HOST = '0.0.0.0'
WEB_PORT = 8888

# Calculator sessions opened through the API
SESSION_IDLE_SECONDS = 30 * 60  # untouched sessions are cancelled after this
MAX_OPEN_SESSIONS = 100         # oldest idle session is cancelled beyond this

# How often the GUI picks up field values changed through the API
FIELD_SYNC_MS = 1000
