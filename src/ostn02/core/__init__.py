"""
Core transformation, grid access and ambient services.
"""
