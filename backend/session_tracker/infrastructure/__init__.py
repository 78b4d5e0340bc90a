"""Infrastructure — database engine, session stores, identity, logging."""
