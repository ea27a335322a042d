import logging
from typing import Dict, List, Optional

from fastapi import Depends
from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPIError
from google.cloud.firestore_v1.base_query import FieldFilter

from ..auth.security import hash_password
from ..core.config import Settings, get_settings
from ..core.errors import BusinessRuleError, StoreError
from ..core.firebase import get_db, snapshot_to_document
from .models import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

class UserService:
    def __init__(self, db, collection: str = "users"):
        self.db = db
        self.collection = collection

    def _users(self):
        return self.db.collection(self.collection)

    async def _find_snapshot(self, username: str):
        query = self._users().where(filter=FieldFilter("Username", "==", username)).limit(1)
        snapshots = [snapshot async for snapshot in query.stream()]
        return snapshots[0] if snapshots else None

    async def list_users(self) -> List[Dict]:
        try:
            return [snapshot_to_document(snapshot) async for snapshot in self._users().stream()]
        except GoogleAPIError as e:
            raise StoreError(f"Failed to list users: {e}") from e

    async def get_user(self, username: str) -> Optional[Dict]:
        try:
            snapshot = await self._find_snapshot(username)
        except GoogleAPIError as e:
            raise StoreError(f"Failed to fetch user {username}: {e}") from e
        return snapshot_to_document(snapshot) if snapshot else None

    async def get_user_by_id(self, user_id: str) -> Optional[Dict]:
        try:
            snapshot = await self._users().document(user_id).get()
        except GoogleAPIError as e:
            raise StoreError(f"Failed to fetch user {user_id}: {e}") from e
        return snapshot_to_document(snapshot) if snapshot.exists else None

    async def create_user(self, user: UserCreate) -> Dict:
        try:
            if await self._find_snapshot(user.Username) is not None:
                raise BusinessRuleError(f"{user.Username} already exists")

            data = {
                'Username': user.Username,
                'Password': hash_password(user.Password),
                'Email': user.Email,
                'Birthday': user.Birthday.isoformat() if user.Birthday else None,
                'FavoriteMovies': [],
            }
            _, user_ref = await self._users().add(data)
            logger.info(f"Registered user {user.Username} ({user_ref.id})")
            return {**data, '_id': user_ref.id}
        except GoogleAPIError as e:
            raise StoreError(f"Failed to register {user.Username}: {e}") from e

    async def update_user(self, username: str, user: UserUpdate) -> Optional[Dict]:
        """Set username, email and birthday on the user matching ``username``.

        Returns None when no user matches.
        """
        try:
            snapshot = await self._find_snapshot(username)
            if snapshot is None:
                return None

            if user.Username != username:
                taken = await self._find_snapshot(user.Username)
                if taken is not None and taken.id != snapshot.id:
                    raise BusinessRuleError(f"{user.Username} already exists")

            await snapshot.reference.update({
                'Username': user.Username,
                'Email': user.Email,
                'Birthday': user.Birthday.isoformat() if user.Birthday else None,
            })
            return snapshot_to_document(await snapshot.reference.get())
        except GoogleAPIError as e:
            raise StoreError(f"Failed to update {username}: {e}") from e

    async def add_favorite(self, username: str, movie_id: str) -> Optional[Dict]:
        """Append ``movie_id`` to the user's favorites. Duplicates are kept."""
        try:
            snapshot = await self._find_snapshot(username)
            if snapshot is None:
                return None

            favorites = list((snapshot.to_dict() or {}).get('FavoriteMovies', []))
            favorites.append(movie_id)
            # Fails instead of overwriting if the user changed since it was read
            await snapshot.reference.update(
                {'FavoriteMovies': favorites},
                option=self.db.write_option(last_update_time=snapshot.update_time),
            )
            return snapshot_to_document(await snapshot.reference.get())
        except GoogleAPIError as e:
            raise StoreError(f"Failed to add {movie_id} to {username}'s favorites: {e}") from e

    async def remove_favorite(self, username: str, movie_id: str) -> Optional[Dict]:
        """Remove every occurrence of ``movie_id`` from the user's favorites."""
        try:
            snapshot = await self._find_snapshot(username)
            if snapshot is None:
                return None

            await snapshot.reference.update({
                'FavoriteMovies': firestore.ArrayRemove([movie_id]),
            })
            return snapshot_to_document(await snapshot.reference.get())
        except GoogleAPIError as e:
            raise StoreError(f"Failed to remove {movie_id} from {username}'s favorites: {e}") from e

    async def delete_user(self, username: str) -> bool:
        try:
            snapshot = await self._find_snapshot(username)
            if snapshot is None:
                return False
            await snapshot.reference.delete()
            logger.info(f"Deleted user {username} ({snapshot.id})")
            return True
        except GoogleAPIError as e:
            raise StoreError(f"Failed to delete {username}: {e}") from e


def get_user_service(db=Depends(get_db), settings: Settings = Depends(get_settings)) -> UserService:
    return UserService(db, settings.USERS_COLLECTION)
