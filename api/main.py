import os
from dotenv import load_dotenv

# Load environment variables before importing the app
load_dotenv()

from gym_api.main import app

if __name__ == "__main__":
    import uvicorn

    PORT = int(os.getenv("API_PORT", "8000"))

    uvicorn.run(
        "gym_api.main:app",
        host="0.0.0.0",
        port=PORT,
        reload=os.getenv("API_RELOAD", "false").lower() == "true",
        log_level="info"
    )
