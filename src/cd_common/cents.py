"""Integer arithmetic for cents-based wallets.

All entry fees, prizes and balances are int (cents). No float, no Decimal.
"""


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '$65.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"


def calculate_fee(amount: int, fee_rate_bps: int) -> int:
    """Fee with ceiling division (platform never loses).

    fee = ceil(amount * fee_rate_bps / 10000)
    """
    if amount == 0 or fee_rate_bps == 0:
        return 0
    return (amount * fee_rate_bps + 9999) // 10000


def split_pot(entry_fee: int, fee_rate_bps: int) -> tuple[int, int]:
    """Split the two escrowed entry fees into (prize_pool, platform_fee).

    prize_pool + platform_fee == 2 * entry_fee always holds.
    """
    pot = entry_fee * 2
    platform_fee = calculate_fee(pot, fee_rate_bps)
    return pot - platform_fee, platform_fee
