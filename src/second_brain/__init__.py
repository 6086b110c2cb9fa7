"""Second Brain - personal knowledge base with a recurring-theme pattern observer"""

__version__ = "0.1.0"
