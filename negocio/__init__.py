"""
Negocio - small business management dashboard
"""
__version__ = "1.0.0"
