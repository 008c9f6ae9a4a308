from typing import Final, Tuple

# Draft shape: four packs of twelve picks each
PACK_COUNT: Final[int] = 4
PICKS_PER_PACK: Final[int] = 12
TOTAL_PICKS: Final[int] = PACK_COUNT * PICKS_PER_PACK

# Game ids
GAME_ID_ALPHABET: Final[str] = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
GAME_ID_LENGTH: Final[int] = 8
GAME_ID_MAX_LENGTH: Final[int] = 64

# Runtime data keys
CURRENT_GAME_ID_KEY: Final[str] = "current_game_id"
USER_GAME_KEY_PREFIX: Final[str] = "user:"

# Card data defaults
NO_CARD_TEXT: Final[str] = "No card text"
UNRATED: Final[str] = "NA"
RATING_REMAP = {"4 deliveries": "D+", "10 cylices": "D"}

# Characters kept when normalizing recognized text, besides alphanumerics and whitespace
FRAGMENT_EXTRA_CHARS: Final[Tuple[str, ...]] = (",", "'")

# Uploads
IMGUR_UPLOAD_URL: Final[str] = "https://api.imgur.com/3/image"
BACKOFF_S = [0.2, 1.0, 3.0]

# Chat commands
DRAFT_CMD: Final[str] = "!draft"
CARD_CMD: Final[str] = "!card"
PING_CMD: Final[str] = "!ping"
