from dotenv import load_dotenv
import os

# Load environment variables from a .env file
load_dotenv()

# Telegram Bot API
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")
TELEGRAM_BOT_USERNAME = os.getenv("TELEGRAM_BOT_USERNAME", "geopal_bot")
TELEGRAM_API_URL = os.getenv("TELEGRAM_API_URL", "https://api.telegram.org")
TELEGRAM_WEBHOOK_SECRET = os.getenv("TELEGRAM_WEBHOOK_SECRET")

# Reverse geocoding
GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY", "")
GEOCODING_URL = os.getenv("GEOCODING_URL", "https://maps.googleapis.com/maps/api/geocode/json")

HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", 10))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Build the bot endpoint URL
TELEGRAM_BOT_URL = f"{TELEGRAM_API_URL}/bot{TELEGRAM_BOT_TOKEN}"
