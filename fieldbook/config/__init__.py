"""
Service config: load from env.

Load from env: load_postgres_config(), load_reservation_config().
"""
from fieldbook.config.postgres import PostgresConfig, load_postgres_config
from fieldbook.config.reservations import ReservationConfig, load_reservation_config

__all__ = [
    "PostgresConfig",
    "load_postgres_config",
    "ReservationConfig",
    "load_reservation_config",
]
