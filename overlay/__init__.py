"""
Horn overlay: short-lived spinning horns that fly across the screen when chat asks for them.
"""
