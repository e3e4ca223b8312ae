"""Table rules for six-card Charlie blackjack.

Dealer stands on all 17s, naturals pay 1:1, no splits or doubles.
"""

# Best possible total; anything above busts.
BLACKJACK = 21

# Dealer stops drawing at this total, soft or hard.
DEALER_STAND_TOTAL = 17

# A hand reaching this many cards ends automatically.
CHARLIE_CARDS = 6

# Payout multipliers applied to the wager, stake included.
WIN_MULTIPLIER = 2
PUSH_MULTIPLIER = 1

INITIAL_BANKROLL = 1000
DEFAULT_WAGER = 10
WAGER_DENOMINATIONS: tuple[int, ...] = (1, 2, 3, 4, 5, 10, 15, 20, 25, 30, 35, 40, 45, 50)

# Loyalty points accrue one per this much throughput.
THROUGHPUT_PER_POINT = 10


def loyalty_points(throughput: int) -> int:
    """Return the loyalty points earned for a cumulative amount wagered."""
    return throughput // THROUGHPUT_PER_POINT
