# main.py
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tens_simulator.api import app as tens_app
from tens_simulator.logging_config import setup_logging

setup_logging(os.environ.get("TENS_LAB_LOG_LEVEL", "INFO"))

app = FastAPI(title="TENS Virtual Lab API", version="1.0.0")

# Comma-separated list; defaults to local frontend development servers
cors_origins = os.environ.get("TENS_LAB_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in cors_origins.split(",") if origin.strip()],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

@app.get("/")
def read_root():
    return {"message": "TENS Virtual Lab API is running", "status": "ok"}

@app.get("/health")
def health_check():
    return {"status": "healthy"}

app.mount("/api", tens_app)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
