"""
Service modules.

Each module builds a request with the service defaults, applies the caller's
customizers and returns a typed handle, e.g.:

    from dbcontainers.modules import influxdb

    with influxdb.run_container(influxdb.with_database("metrics")) as db:
        url = db.connection_url()
"""

from . import gcloud, influxdb, neo4j, surrealdb  # noqa: F401

__all__ = ["gcloud", "influxdb", "neo4j", "surrealdb"]
