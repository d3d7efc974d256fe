from utils.db import DatabasePool

db_pool = DatabasePool()
