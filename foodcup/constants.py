"""Global constants for the foodcup application."""

# Bracket sizes the engine supports, smallest first
BRACKET_SIZES = (4, 8, 16, 32, 64)
MAX_BRACKET_SIZE = BRACKET_SIZES[-1]
MIN_ENTRIES = 4

# Placeholder opponent used to pad an entry list
BYE = "(BYE)"

# Reward modes
REWARD_MODE_RANDOM = "random"
REWARD_MODE_WEIGHTED = "weighted"
REWARD_MODES = (REWARD_MODE_RANDOM, REWARD_MODE_WEIGHTED)

# Probability of upgrading a drawn reward to a coupon, per mode
COUPON_CHANCE = {
    REWARD_MODE_WEIGHTED: 0.35,
    REWARD_MODE_RANDOM: 0.15,
}

COUPON_LABEL = "Coupon granted"
FALLBACK_REWARD = "Badge: Thanks for playing"
COUPON_PREFIX = "FOOD"
COUPON_LENGTH = 8
# No I, O, 0 or 1
COUPON_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"

DEFAULT_REWARDS = [
    "Badge: Food Curator 🧭",
    "Coupon: 3,000 KRW off delivery",
    "Coupon: Free americano",
    "Random sticker pack 🎉",
    "Badge: Gourmet's Road 🍽️",
]

# Local persistence
STORAGE_KEY = "food-tournaments"

# Firestore collections
TOURNAMENTS_COLLECTION = "tournaments"
USERS_COLLECTION = "users"

# Spoons granted for finishing a tournament while signed in
SPOONS_PER_FINISH = 1
