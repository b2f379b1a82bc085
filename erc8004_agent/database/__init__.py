"""Database models and configuration."""

from .database import Base, SessionLocal, engine, get_db
from .models import LinkNonce, WalletLink

__all__ = ["Base", "LinkNonce", "WalletLink", "get_db", "engine", "SessionLocal"]
