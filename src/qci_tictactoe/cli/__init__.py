"""Command-line interface for QCI Tic-Tac-Toe."""
