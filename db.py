import os
from typing import Optional
from pymongo import MongoClient
from dotenv import load_dotenv

load_dotenv()
MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "hris")
EMPLOYEES_COLLECTION = os.getenv("EMPLOYEES_COLLECTION", "employees")

_client = None

def get_client():
    global _client
    if _client is None:
        _client = MongoClient(
            MONGODB_URI,
            retryWrites=True,
            serverSelectionTimeoutMS=8000,
            appname="HRIS_MIGRATE",
        )
        # Fail fast if the URI/network is misconfigured
        _client.admin.command("ping")
    return _client

def get_db(name: Optional[str] = None):
    return get_client()[name or DB_NAME]

def col(name: str, db_name: Optional[str] = None):
    return get_db(db_name)[name]
