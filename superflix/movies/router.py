from fastapi import APIRouter, Depends
from typing import List, Optional

from ..auth.dependencies import get_current_user
from .models import Movie
from .service import MovieService, get_movie_service

router = APIRouter(
    prefix="/movies",
    tags=["movies"],
    dependencies=[Depends(get_current_user)],
)

@router.get("", response_model=List[Movie], status_code=201)
async def get_all_movies(movies: MovieService = Depends(get_movie_service)):
    """Full movie list"""
    return await movies.list_movies()

@router.get("/series/{Name}", response_model=List[Movie])
async def get_series(Name: str, movies: MovieService = Depends(get_movie_service)):
    """Movies belonging to the named series"""
    return await movies.get_movies_by_series(Name)

@router.get("/directors/{Name}", response_model=List[Movie])
async def get_director(Name: str, movies: MovieService = Depends(get_movie_service)):
    """Movies by the named director"""
    return await movies.get_movies_by_director(Name)

@router.get("/{Title}", response_model=Optional[Movie])
async def get_movie(Title: str, movies: MovieService = Depends(get_movie_service)):
    """Single movie by title, or null when no movie matches"""
    return await movies.get_movie_by_title(Title)
