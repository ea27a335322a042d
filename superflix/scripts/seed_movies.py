# python -m superflix.scripts.seed_movies [path/to/movies.json]
import asyncio
import json
import sys
from pathlib import Path

from ..core.config import ROOT_DIR, settings
from ..core.firebase import client_for

DEFAULT_MOVIES_PATH = ROOT_DIR / "data" / "movies.json"

def load_movies(path: Path) -> list:
    with open(path, encoding="utf-8") as f:
        movies = json.load(f)
    if not isinstance(movies, list):
        raise ValueError(f"{path} must contain a JSON list of movies")
    return movies

async def seed_movies(db, movies: list, collection: str = "movies") -> int:
    """Create one document per movie in the movies collection"""
    created = 0
    for movie in movies:
        _, movie_ref = await db.collection(collection).add(movie)
        print(f"Created movie: {movie.get('Title')} ({movie_ref.id})")
        created += 1
    return created

def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    path = Path(argv[0]) if argv else DEFAULT_MOVIES_PATH
    movies = load_movies(path)
    db = client_for(settings)
    created = asyncio.run(seed_movies(db, movies, settings.MOVIES_COLLECTION))
    print(f"Seeded {created} movies into '{settings.MOVIES_COLLECTION}'")
    return 0

if __name__ == "__main__":
    sys.exit(main())
