"""Moteur de règles du jeu ASUDE (plateau 13×13, deux joueurs)."""

__version__ = "0.1.0"
