"""Aquarium tracker service: clasificación de parámetros y cache offline."""
