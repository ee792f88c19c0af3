"""Database configuration and initialization for the local mirror."""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

# Create SQLAlchemy base
Base = declarative_base()


def init_db(config):
    """
    Create the mirror engine and a session factory.

    The mirror is a local cache of the remote store, so the schema is created
    on the fly instead of being migrated.

    Args:
        config: dict-like configuration (MIRROR_DATABASE_URL, SQLALCHEMY_ECHO)

    Returns:
        (engine, session_factory)
    """
    database_uri = config['MIRROR_DATABASE_URL']
    engine_kwargs = {'echo': config.get('SQLALCHEMY_ECHO', False)}

    if database_uri.startswith('sqlite'):
        engine_kwargs['connect_args'] = {'check_same_thread': False}
        if ':memory:' in database_uri or database_uri.rstrip('/') == 'sqlite:':
            # Every connection to :memory: is a new database; share a single one
            engine_kwargs['poolclass'] = StaticPool
    else:
        engine_kwargs['pool_pre_ping'] = True  # Enable connection health checks

    engine = create_engine(database_uri, **engine_kwargs)

    # Register every mapped table before create_all
    import possync.models  # noqa: F401
    Base.metadata.create_all(engine)

    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)
    return engine, session_factory
