"""
reqtraq.utilities - Helpers around the certdoc core (git context, line reading)
"""
