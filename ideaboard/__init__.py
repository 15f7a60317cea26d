"""Idea Board — public idea submission and voting service."""
