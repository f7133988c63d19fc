# Centralized constants for blueprint rendering

VERSION = "v1"

SVG_NAMESPACE = "http://www.w3.org/2000/svg"

# Canvas
CANVAS_WIDTH = 1000
CANVAS_HEIGHT = 800

# Room outlines
ROOM_FILL = "none"
ROOM_STROKE = "black"
ROOM_STROKE_WIDTH = 2

# Room labels, offset from the room's top-left corner
LABEL_OFFSET_X = 10.0
LABEL_OFFSET_Y = 20.0
LABEL_FONT_SIZE = 14
