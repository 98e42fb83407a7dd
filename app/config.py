# app/config.py

import os
from dotenv import load_dotenv


load_dotenv()


FASTAPI_URL = os.getenv("FASTAPI_URL", "http://localhost:8000")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", 10))

COOKIE_PASSWORD = os.getenv("COOKIE_PASSWORD")
COOKIE_PREFIX = os.getenv("COOKIE_PREFIX", "quill/")
