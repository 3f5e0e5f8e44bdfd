"""
Core constants for the file operation mediator.

Following the style guide: no magic constants in code.
"""

# Operation block fence, e.g. ```fileop ... ```
OPERATION_FENCE_TAG = "fileop"

# Header of the summary appended to a processed response
RESULTS_HEADER = "=== File Operations Results ==="
SUCCESS_PREFIX = "✅"
FAILURE_PREFIX = "❌"

# Audit log file name, relative to the workspace root
AUDIT_LOG_FILENAME = "audit.log"
AUDIT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Command execution
DEFAULT_COMMAND_TIMEOUT = 120  # seconds

# Confirmation prompt previews
CONTENT_PREVIEW_CHARS = 200
