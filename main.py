import uvicorn

from superflix.core.config import settings

if __name__ == "__main__":
    uvicorn.run("superflix.main:app", host="0.0.0.0", port=settings.PORT)
