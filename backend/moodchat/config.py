# backend/moodchat/config.py
import os
from dotenv import load_dotenv

load_dotenv(dotenv_path=os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), ".env"))

DEV_SECRET_KEY = "moodchat-dev-secret"

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./moodchat.db")

SECRET_KEY = os.getenv("SECRET_KEY", DEV_SECRET_KEY)
ALGORITHM = os.getenv("ALGORITHM", "HS256")
# 7일
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "10080"))
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "token")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if origin.strip()
]

OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_TIMEOUT_S = float(os.getenv("OPENAI_TIMEOUT_S", "30"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

SENTIMENT_SYSTEM_PROMPT = """
You are a warm, supportive companion inside a mood-tracking journal app.
Core rules:
- Reply to the user's latest message in 1-4 short sentences. Simple markdown is allowed.
- Be validating and gentle. Never diagnose and never promise outcomes.
- If the user mentions self-harm, encourage them to contact local emergency services or a crisis line.
- Classify the user's current mood as exactly one of: Happy, Neutral, Stressed, Sad, Anxious, Angry.
Output ONLY a JSON object of the form {"response": "<your reply>", "mood": "<one mood>"}.
"""
