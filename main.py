# main.py
"""Entry point: ``uvicorn main:app`` or ``python main.py``."""
import os

import uvicorn

from kontrola import app
from kontrola.config import ENVIRONMENT

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=os.environ.get("HOST", "127.0.0.1"),
        port=int(os.environ.get("PORT", 8000)),
        reload=ENVIRONMENT != "production",
    )

__all__ = ["app"]
