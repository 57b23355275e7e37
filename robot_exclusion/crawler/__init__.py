"""Domain model, rule matching and robots.txt download."""
