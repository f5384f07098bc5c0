"""
This  module is responsible for loading movies into the database in bulk.
It reads a JSON array of movie payloads, validates each one with the same
rules the API applies, skips duplicates (same nome and diretor) and inserts
the rest into the movies collection.
app.ingest.py
"""
import json
import sys

from tqdm import tqdm

from app.db import create_client, get_movie_collection
from app.movie_service import create_movie_doc
from app.validation import errors_by_field, validate_movie


def load_payloads(path):
    with open(path, encoding="utf-8") as f:
        payloads = json.load(f)
    if not isinstance(payloads, list):
        raise ValueError(f"{path} must contain a JSON array of movies")
    return payloads

def ingest_movies(path, collection, limit=None):
    payloads = load_payloads(path)
    if limit is not None:
        payloads = payloads[:limit]

    counts = {"inserted": 0, "skipped_invalid": 0, "skipped_duplicate": 0}

    for count, payload in enumerate(tqdm(payloads, desc="Loading movies")):
        if not isinstance(payload, dict):
            print(f"[{count}] Skipped invalid: not a JSON object")
            counts["skipped_invalid"] += 1
            continue

        # an _id from an export is not reused, the store assigns a new one
        payload = {k: v for k, v in payload.items() if k != "_id"}
        movie, errors = validate_movie(payload)
        if errors:
            print(f"[{count}] Skipped invalid: {errors_by_field(errors)}")
            counts["skipped_invalid"] += 1
            continue

        if collection.find_one({"nome": movie["nome"], "diretor": movie["diretor"]}):
            print(f"[{count}] Skipped duplicate: {movie['nome']}")
            counts["skipped_duplicate"] += 1
            continue

        create_movie_doc(collection, movie)
        print(f"[{count}] Inserted: {movie['nome']}")
        counts["inserted"] += 1

    return counts

if __name__ == "__main__":
    path = sys.argv[1] if len(sys.argv) > 1 else "data/filmes.json"
    client = create_client()
    try:
        print(ingest_movies(path, get_movie_collection(client)))
    finally:
        client.close()
