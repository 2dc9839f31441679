# shop_client.config
import os
from dotenv import load_dotenv

load_dotenv()

def _clean_env(v: str) -> str:
    return (v or "").strip().strip("'").strip('"').strip("`")

# URL du backend storefront (catalogue + création de session)
BACKEND_URL = (_clean_env(os.getenv("SHOP_BACKEND_URL")) or "http://localhost:5000").rstrip("/")

try:
    HTTP_TIMEOUT = float(_clean_env(os.getenv("SHOP_HTTP_TIMEOUT")) or 10)
except ValueError:
    HTTP_TIMEOUT = 10.0
