"""Speaker model matching engine."""
