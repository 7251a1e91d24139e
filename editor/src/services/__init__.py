"""
ID Card Layout Editor - Services

Layout pass shared by the editor and the static renderer, image loading,
PNG rendering and JSON layout storage.
"""
