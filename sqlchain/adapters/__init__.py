from sqlchain.adapters import dbapi, sqlite

__all__ = ("dbapi", "sqlite")
