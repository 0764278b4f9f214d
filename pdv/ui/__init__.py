"""PyQt5 screens."""
