"""Awakening directory command line interface."""
