"""Reserved account identifiers."""

# Users-table row that collects the platform's share of every decided match.
# Seeded by migration 007; never joins the queue.
PLATFORM_FEE_USER_ID = "PLATFORM_FEE"
