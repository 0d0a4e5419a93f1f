"""Live caption collector: turns noisy caption redraws into a timestamped per-utterance transcript."""
