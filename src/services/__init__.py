"""
Services package for the recurring transaction detection engine.
"""
