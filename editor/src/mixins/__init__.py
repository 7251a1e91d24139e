"""Main window mixins for the card layout editor"""
