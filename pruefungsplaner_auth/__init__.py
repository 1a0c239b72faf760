"""pruefungsplaner-auth: startup configuration for the authentication server"""

__version__ = "1.0.0"
