"""
Routes package
Flask blueprint routes
"""

from .dashboard import dashboard_bp
from .api import api_bp

__all__ = ['dashboard_bp', 'api_bp']
