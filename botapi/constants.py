"""Fixed values of the remote Bot API contract."""

API_ENDPOINT: str = "https://api.telegram.org"

# ``{endpoint}/bot{token}/{method}`` and ``{endpoint}/file/bot{token}/{path}``
METHOD_URL_TEMPLATE: str = "{endpoint}/bot{token}/{method}"
FILE_URL_TEMPLATE: str = "{endpoint}/file/bot{token}/{path}"

# Maximum size of a text message, in UTF-8 bytes.
MAX_MESSAGE_LENGTH: int = 4096

# getUpdates page limits
MIN_UPDATES_LIMIT: int = 1
MAX_UPDATES_LIMIT: int = 100
DEFAULT_POLL_TIMEOUT: int = 30

# ── Chat actions (sendChatAction) ────────────────────────────────────────────
ACTION_TYPING = "typing"
ACTION_UPLOAD_PHOTO = "upload_photo"
ACTION_RECORD_VIDEO = "record_video"
ACTION_UPLOAD_VIDEO = "upload_video"
ACTION_RECORD_AUDIO = "record_audio"
ACTION_UPLOAD_AUDIO = "upload_audio"
ACTION_UPLOAD_DOCUMENT = "upload_document"
ACTION_FIND_LOCATION = "find_location"

CHAT_ACTIONS: frozenset[str] = frozenset({
    ACTION_TYPING,
    ACTION_UPLOAD_PHOTO,
    ACTION_RECORD_VIDEO,
    ACTION_UPLOAD_VIDEO,
    ACTION_RECORD_AUDIO,
    ACTION_UPLOAD_AUDIO,
    ACTION_UPLOAD_DOCUMENT,
    ACTION_FIND_LOCATION,
})

# ── Parse modes ──────────────────────────────────────────────────────────────
PARSE_MODE_MARKDOWN = "Markdown"
PARSE_MODE_MARKDOWN_V2 = "MarkdownV2"
PARSE_MODE_HTML = "HTML"
