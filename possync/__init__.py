"""Client factory for the point-of-sale sync core."""
import importlib
import logging

from possync.database import init_db


def load_config(config_object='config.Config') -> dict:
    """Collect the upper-case attributes of a config class (dotted path or object)."""
    if isinstance(config_object, str):
        module_name, _, attr = config_object.rpartition('.')
        config_object = getattr(importlib.import_module(module_name), attr)
    return {key: getattr(config_object, key) for key in dir(config_object) if key.isupper()}


def setup_logging(config: dict) -> None:
    """Attach a stream handler to the package logger at LOG_LEVEL."""
    level = getattr(logging, str(config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    package_logger = logging.getLogger(__name__)
    package_logger.setLevel(level)

    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s - %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )
        package_logger.addHandler(handler)


def create_client(config_object='config.Config', gateway=None, on_print=None):
    """
    Create a PosClient with its mirror database and remote gateway.

    Args:
        config_object: Config class or dotted path to one
        gateway: RemoteGateway to use instead of the HTTP one built from config
        on_print: Callable receiving a PrintIntent after each sale and return

    Returns:
        PosClient, logged out until login() is called
    """
    from possync.client import PosClient
    from possync.gateway import HttpRemoteGateway
    from possync.store import EntityStore

    config = load_config(config_object)
    setup_logging(config)

    # Initialize mirror database
    engine, session_factory = init_db(config)

    if gateway is None:
        gateway = HttpRemoteGateway.from_config(config)

    store = EntityStore(session_factory, gateway)
    return PosClient(store, gateway, config=config, on_print=on_print, engine=engine)
