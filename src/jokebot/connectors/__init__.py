"""Transports: console REPL and Matrix, plus the background runner they share."""
