import logging
from typing import Dict, List, Optional

from fastapi import Depends
from google.api_core.exceptions import GoogleAPIError
from google.cloud.firestore_v1.base_query import FieldFilter

from ..core.config import Settings, get_settings
from ..core.errors import StoreError
from ..core.firebase import get_db, snapshot_to_document

logger = logging.getLogger(__name__)

class MovieService:
    """Read-only access to the movie catalog."""

    def __init__(self, db, collection: str = "movies"):
        self.db = db
        self.collection = collection

    async def _find(self, field: Optional[str] = None, value: Optional[str] = None, limit: Optional[int] = None) -> List[Dict]:
        query = self.db.collection(self.collection)
        if field is not None:
            query = query.where(filter=FieldFilter(field, "==", value))
        if limit is not None:
            query = query.limit(limit)
        try:
            return [snapshot_to_document(snapshot) async for snapshot in query.stream()]
        except GoogleAPIError as e:
            raise StoreError(f"Failed to query {self.collection} by {field or 'all'}: {e}") from e

    async def list_movies(self) -> List[Dict]:
        return await self._find()

    async def get_movie_by_title(self, title: str) -> Optional[Dict]:
        movies = await self._find("Title", title, limit=1)
        return movies[0] if movies else None

    async def get_movies_by_series(self, name: str) -> List[Dict]:
        return await self._find("Series.Name", name)

    async def get_movies_by_director(self, name: str) -> List[Dict]:
        return await self._find("Director.Name", name)


def get_movie_service(db=Depends(get_db), settings: Settings = Depends(get_settings)) -> MovieService:
    return MovieService(db, settings.MOVIES_COLLECTION)
