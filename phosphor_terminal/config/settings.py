# Application settings

# --- Effect Parameters ---
EFFECT_DEFAULTS = {
    "mapping_intensity": 0.85,
    "contrast": 1.4,
    "brightness": 1.1,
    "glow_intensity": 0.35,
    "scanline_intensity": 0.15,
    "curvature": 0.03,
    "vignette_intensity": 0.3,
    "color_shift": 0.3,  # Unified pass only
    "palette": "green",  # Options: green, amber
    "lens_enabled": False,
}

# Advisory (min, max) bounds, taken from the slider ranges of the reference UI.
PARAMETER_BOUNDS = {
    "mapping_intensity": (0.0, 1.0),
    "contrast": (0.5, 2.5),
    "brightness": (0.5, 1.5),
    "glow_intensity": (0.0, 1.0),
    "scanline_intensity": (0.0, 0.5),
    "curvature": (0.0, 0.1),
    "vignette_intensity": (0.0, 0.7),
    "color_shift": (0.0, 1.0),
}

# --- Sequential Pipeline Constants ---
LUMINANCE_WEIGHTS = (0.299, 0.587, 0.114)  # BT.601
TONE_CURVE_EXPONENT = 0.8
BLOOM_RADIUS = 2  # 5x5 neighbourhood
SCANLINE_PERIOD = 3  # Every third row is darkened

# --- Unified Pass Constants ---
UNIFIED_TARGET_GREEN = (0.1, 0.8, 0.2)
UNIFIED_WHITE_LUM_EDGES = (0.7, 0.9)
UNIFIED_WHITE_SAT_EDGES = (0.0, 0.2)
UNIFIED_RED_SHIFT_GAIN = 0.5
UNIFIED_BLUE_SHIFT_GAIN = 0.7
UNIFIED_SCANLINE_FREQUENCY = 400.0
UNIFIED_SCANLINE_DEPTH = 0.08

# --- Execution ---
PROCESSING_WORKERS = 1  # Row-band threads for the sequential strategy
PREFER_GPU = True

# --- Logging ---
LOGGING_LEVEL = "INFO" # Options: DEBUG, INFO, WARNING, ERROR
