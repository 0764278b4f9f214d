"""Receipt rendering and printing."""
