"""Restaurant point-of-sale backend package."""
