from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Union

class SeriesInfo(BaseModel):
    Name: str
    Description: Optional[str] = None

class DirectorInfo(BaseModel):
    Name: str
    Bio: Optional[str] = None
    # Seeded as ISO strings or as Firestore timestamps
    Birth: Optional[Union[date, datetime, str]] = None
    Death: Optional[Union[date, datetime, str]] = None

class Movie(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, alias="_id")
    Title: str
    Description: Optional[str] = None
    Series: Optional[SeriesInfo] = None
    Director: Optional[DirectorInfo] = None
    ImagePath: Optional[str] = None
    Featured: bool = False
