"""
ID Card Layout Editor - Constants and Configuration

This module contains all constant values used throughout the application:
- Card surface geometry
- Gesture thresholds
- Viewport limits
- Animation timings (card flip, viewport clamp)
- Default element layout
- Rendering constants for the static card renderer
"""

# ======================================================================
# CARD SURFACE
# ======================================================================
# Card is in landscape mode, so width > height.
# All element positions live in this unscaled, unrotated space
# (0,0 = top-left of the card).

CARD_ASPECT_RATIO = 0.63  # height / width
CARD_HEIGHT = 750.0
CARD_WIDTH = CARD_HEIGHT / CARD_ASPECT_RATIO

# Card background and template fallback fill
CARD_BACKGROUND_COLOR = '#FFFFFF'
TEMPLATE_PLACEHOLDER_COLOR = '#E0E0E0'

# ======================================================================
# GESTURE THRESHOLDS
# ======================================================================

# Movement (logical px) a pointer may travel and still count as a tap.
# Element drags only claim the gesture once movement exceeds it.
TAP_SLOP_PX = 15.0

# Externally supplied positions closer than this to the last known
# position are treated as our own commit echoing back
POSITION_EPSILON = 0.1

# Minimum pointer count for a viewport pan (single pointer drags elements)
VIEWPORT_PAN_MIN_POINTERS = 2

# ======================================================================
# VIEWPORT
# ======================================================================

VIEWPORT_SCALE_MIN = 1.0
VIEWPORT_SCALE_MAX = 3.0

# Smallest scale ever used as a divisor
MIN_SAFE_SCALE = 1e-3

# Ctrl+wheel zoom step for the desktop canvas (one notch = one pinch)
WHEEL_ZOOM_STEP = 1.25

# ======================================================================
# ANIMATION
# ======================================================================

# Default timing animation (viewport clamp, editor reset)
DEFAULT_ANIMATION_MS = 300

# Card flip
FLIP_TAP_DURATION_MS = 180
FLIP_RELEASE_DURATION_MS = 180
FLIP_DRAG_SPAN_PX = 200.0        # drag distance for a full 180 degree flip
FLIP_VELOCITY_DEGREES = 45.0     # degrees contributed per 1000 px/s of fling
FLIP_FACE_THRESHOLD = 90.0
FLIP_FLING_IDLE_MS = 100        # pause before release that cancels a fling

# Frame tick for Qt hosts driving the controllers
FRAME_INTERVAL_MS = 16

# ======================================================================
# ELEMENT GEOMETRY
# ======================================================================

# All card fields are drawn counter-clockwise for the landscape card
ELEMENT_ROTATION = -90.0

PHOTO_SIZE = (160.0, 160.0 * 1.2)
LOGO_SIZE = (80.0, 80.0)
TEXT_FIELD_WIDTH = 150.0
BIRTH_FIELD_WIDTH = 200.0
TEXT_LINE_HEIGHT = 30.0

PHOTO_BORDER_WIDTH = 2
PHOTO_BORDER_COLOR = '#FFFFFF'

# ======================================================================
# TEXT
# ======================================================================

TEXT_FONT_SIZE = 16
TEXT_COLOR = '#000000'

PLACEHOLDER_FIRST_NAME = 'Test First Name'
PLACEHOLDER_LAST_NAME = 'Test Last Name'
PLACEHOLDER_BIRTH_DATE = '22/22/2002'
PLACEHOLDER_BIRTH_PLACE = 'BATNA-BATNA'
PLACEHOLDER_MAJOR = 'Test Major'
PLACEHOLDER_BRANCH = 'Test Branch'

# ======================================================================
# DEFAULT LAYOUT
# ======================================================================
# Element id -> (x, y) in card space

DEFAULT_POSITIONS = {
    'photo':             (470.0, CARD_HEIGHT * 0.008),
    'last_name':         (394.0, 415.0),
    'first_name':        (436.0, 414.0),
    'arabic_last_name':  (395.0, 152.0),
    'arabic_first_name': (434.0, 161.0),
    'birth':             (449.0, 258.0),
    'major':             (515.0, 249.0),
    'branch':            (556.0, 210.0),
    'academic_year':     (647.0, 132.0),
    'university':        (306.0, 297.0),
    'logo1':             (342.0, 56.0),
    'logo2':             (339.0, 516.0),
}

# ======================================================================
# DEBUG GRID
# ======================================================================

DEBUG_GRID_DIVISIONS = 25
DEBUG_GRID_COLOR = (255, 0, 0, 90)
DEBUG_GRID_LABEL_COLOR = (255, 0, 0, 200)

# ======================================================================
# PERSISTENCE
# ======================================================================

STORAGE_KEY_POSITIONS = 'positions'
STORAGE_KEY_TEMPLATE = 'template'
STORAGE_KEY_LOGO1 = 'logo1'
STORAGE_KEY_LOGO2 = 'logo2'
STORAGE_KEY_CARD_PHOTO = 'card_photo'
STORAGE_KEY_CARD_IMAGE = 'card_image'
STORAGE_KEY_PROFILE = 'profile'

MAX_RECENT_EXPORTS = 10
