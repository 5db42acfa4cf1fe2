"""Song and artist resolution pipeline."""
