"""Feature platforms of recipe-keeper."""
