"""
Application constants and version information.
"""

# Application version
VERSION = "0.1.0"

# Application name
APP_NAME = "ChatGuru Webhook Integration"

# API endpoints
HEALTH_ENDPOINT = "/health"
WEBHOOK_ENDPOINT = "/api/chatguru/webhook"

# ChatGuru HTTP API
DEFAULT_API_ENDPOINT = "https://api.chatguru.app/api/v1"
API_PATH = "/api/v1"
DEFAULT_PHONE_ID = "62558780e2923cc4705beee1"  # Phone ID padrão do sistema

ACTION_NOTE_ADD = "note_add"
ACTION_MESSAGE_SEND = "message_send"

# Service configuration
DEFAULT_TIMEOUT = 10.0
DEFAULT_CONNECT_TIMEOUT = 3.0

# The API answers with a localized body when the chat was never started.
# "Chat n" also catches the variant where the accent arrives mangled.
CHAT_NOT_FOUND_MARKERS = (
    "Chat não encontrado",
    "Chat não existe",
    "Chat n",
)

# Webhook defaults
DEFAULT_CONTACT_NAME = "Contato"
