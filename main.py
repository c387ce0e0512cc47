from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import os
import logging
from dotenv import load_dotenv

from db import Base, engine
from models import models  # noqa: F401  registers tables on Base.metadata
from account_routes import router as account_router
from insight.routes import router as insight_router

load_dotenv()

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logging.info("App starting")

app = FastAPI(title="Exchange Placement Insight", version="1.0.0")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

Base.metadata.create_all(bind=engine)

app.include_router(account_router)
app.include_router(insight_router)


@app.get("/health", tags=["meta"], summary="Health check")
def health():
    return {"status": "ok"}
