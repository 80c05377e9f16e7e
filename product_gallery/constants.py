"""
Default values and limits for product images and the gallery viewer.
"""

# Record defaults
DEFAULT_IMAGE_WIDTH = 1200
DEFAULT_IMAGE_HEIGHT = 800
DEFAULT_IMAGE_ROTATION = 0

ROTATION_ANGLES = (0, 90, 180, 270)

# Field limits enforced by request validation
URL_MAX_LENGTH = 500
CAPTION_MAX_LENGTH = 150

# Gallery viewer
MIN_ZOOM = 1.0
MAX_ZOOM = 3.0
ZOOM_STEP = 0.5
ROTATION_STEP = 90
FULL_TURN = 360

# Error codes
VALIDATION_ERROR = "VALIDATION_ERROR"
NOT_FOUND = "NOT_FOUND"
INTERNAL_ERROR = "INTERNAL_ERROR"
