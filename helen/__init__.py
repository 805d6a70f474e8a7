"""Lobby formats and settings, players, bans, chat, game servers and an admin log."""

__version__ = "0.1.0"