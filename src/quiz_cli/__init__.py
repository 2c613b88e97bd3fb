"""Terminal multiple-choice quiz game."""
