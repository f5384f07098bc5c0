"""
This module handles the connection to the MongoDB database.
It reads the connection settings from the environment (or a .env file)
and provides functions to build the client and to get the movies collection.
The client is created once at startup and passed around explicitly.
app.db.py
"""
import os
from dotenv import load_dotenv
from pymongo import MongoClient

load_dotenv()

MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "filmes_db")
COLLECTION_NAME = os.getenv("COLLECTION_NAME", "filmes")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def create_client(uri=None):
    return MongoClient(uri or MONGO_URI)

def get_movie_collection(client):
    return client[DB_NAME][COLLECTION_NAME]
