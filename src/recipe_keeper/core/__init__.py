"""Shared core building blocks for recipe-keeper."""
