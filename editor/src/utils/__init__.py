"""Geometry, animation and logging helpers"""
