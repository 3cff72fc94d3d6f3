__version__ = "0.1.0"
__description__ = "forgequery : whitelisted query composition for SqlAlchemy resources"
