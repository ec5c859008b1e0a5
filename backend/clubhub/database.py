from databases import Database

from clubhub.config import config

database = Database(config.pg_dsn)
