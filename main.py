import uvicorn

from country_info import config
from country_info.main import app

if __name__ == "__main__":
    print(f"Server running at http://localhost:{config.PORT}")
    print(f"Base URL: {config.REST_COUNTRIES_API}")
    uvicorn.run(app, host=config.HOST, port=config.PORT)
