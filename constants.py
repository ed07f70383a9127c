# Constants and defaults for Deck Convert.

# CLI / batch defaults
DEFAULT_RAW_DIR = "data/raw"
DEFAULT_PROCESSED_DIR = "data/processed"
DEFAULT_CLOZE_COLOR = "rgb(255, 189, 128)"
OUTPUT_SUFFIX = "_out.tsv"
PACKAGE_EXTENSION = ".zip"

# Data file lookup inside an exported package
DATA_FILE_NAMES = ("item.csv", "items.csv")
DATA_FILE_EXTENSIONS = (".csv", ".tsv", ".txt")
MEDIA_DIR_NAME = "media"

# Embedded audio marker used by the target flashcard tool
SOUND_PREFIX = "[sound:"

# Inline styles written into rewritten markup
CARD_STYLE = "padding-bottom:1rem;"
IMAGE_LAYOUT_DECLARATIONS = [
    "display:inline-block",
    "width:calc(50% - 10px)",
    "padding-bottom:29%",
    "background-position:center",
    "background-repeat:no-repeat",
    "background-size:cover",
    "margin-left:2px",
    "margin-right:2px",
]
AUDIO_CLASS = "dc-audio"
AUDIO_STYLE = "padding:0.4rem;margin-top:0.25rem;"

# Record I/O
ENCODING_PRIORITY = ['utf-8', 'gb18030', 'latin-1']
ENCODING_MIN_CONFIDENCE = 0.7
COMMENT_PREFIX = "#"

# Web UI
MAX_UPLOAD_MB = 200
MAX_UPLOAD_BYTES = MAX_UPLOAD_MB * 1024 * 1024
MAX_PREVIEW_ROWS = 10
UPLOAD_TYPES = ["zip", "csv", "tsv", "txt"]

DEFAULT_SESSION_STATE = {
    'uploader_id': "1000",
    'converted_rows': None,
    'converted_name': "",
}
MIN_RANDOM_ID = 100000
MAX_RANDOM_ID = 999999
