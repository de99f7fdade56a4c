# Application settings

# --- Histogram Parameters ---
HISTOGRAM_DEFAULTS = {
    "levels": 256,        # Number of intensity levels per 8-bit channel
    "bar_scale": 256,     # Vertical resolution of the rendered histogram
    "bar_alpha": 0.65,    # Opacity of each overlaid channel
    "channel_colors": {   # RGB colours used when drawing the channel bars
        "red": (255, 0, 0),
        "green": (0, 255, 0),
        "blue": (0, 0, 255),
    },
}

# --- Tone Curve Parameters ---
CURVE_DEFAULTS = {
    # Default control points give the identity mapping
    "enter": (0, 0),
    "exit": (255, 255),
    "level_min": 0,
    "level_max": 255,
}

# --- Guide Rendering ---
GUIDE_DEFAULTS = {
    "size": 256,
    "background": (255, 255, 255, 255),
    "reference_color": (0, 0, 255, 255),  # Identity diagonal
    "reference_width": 3,
    "curve_color": (0, 0, 0, 255),
    "curve_width": 1,
    "point_radius": 5,
}

# --- Export Defaults ---
EXPORT_DEFAULTS = {
    "data_uri_format": "PNG",
    "default_jpeg_quality": 95,
    "default_png_compression": 6,
}

# --- Logging ---
LOGGING_LEVEL = "INFO" # Options: DEBUG, INFO, WARNING, ERROR
