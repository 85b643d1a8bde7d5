"""Client-side aggregation of fetched markets and bets."""
