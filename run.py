from dotenv import load_dotenv
import os

# Load environment variables from .env file
load_dotenv()

from plazacore_backend import create_app  # noqa: E402  (config reads the environment at import)

app = create_app(os.getenv("CONFIG_CLASS", "plazacore_backend.config.DevelopmentConfig"))

if __name__ == "__main__":
    port = int(os.getenv("PORT", 8000))  # Default to 8000 if not in .env
    app.run(host="0.0.0.0", port=port)
