from bootcamp_directory.connections.mongo import mongo_lifespan

__all__ = ["mongo_lifespan"]
