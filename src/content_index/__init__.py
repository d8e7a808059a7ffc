"""Content Index - bidirectional filename/content-hash index for version control."""

__version__ = "0.1.0"

# Directory and file constants
CIX_DIR = ".content-index"
CONFIG_FILE = "config.json"
INDEX_FILE = "index"
COMMIT_INDEX_FILE = "commitmap"
