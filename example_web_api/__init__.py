"""
Example Web API - server-rendered CRUD pages for pets.
"""

__version__ = "1.0.0"
