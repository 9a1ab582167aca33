"""
Business logic constants for EagleZone.

Central location for game defaults and referral reward rules.
This module is imported by settings (as defaults), services and bot handlers,
so it must not import anything from the application.
"""

# Game defaults for a freshly created player
DEFAULT_CLICK_POWER = 1
DEFAULT_ENERGY = 500
DEFAULT_MAX_ENERGY = 500

# Referral program
# Flat bonus for every invited friend
INVITE_BONUS = 500
# Every FRIENDS_PER_REWARD-th friend pays REWARD_AMOUNT on top
FRIENDS_PER_REWARD = 10
REWARD_AMOUNT = 10000

# Referral token: "ref" + optional separator + player id
REFERRAL_PREFIX = "ref"
REFERRAL_SEPARATOR = "_"

# Optimistic concurrency: attempts before a referrer update is given up
REFERRAL_CREDIT_MAX_ATTEMPTS = 5

# Game front-end (Telegram Web App)
DEFAULT_WEB_APP_URL = "https://eaglezonegame.netlify.app"

# Placeholder avatar keyed by player id
AVATAR_PLACEHOLDER_URL = "https://api.dicebear.com/7.x/identicon/svg?seed={seed}"
TELEGRAM_FILE_URL = "https://api.telegram.org/file/bot{token}/{file_path}"

# Token ticker shown to players
TOKEN_SYMBOL = "EAGLE"
