# gradeportal/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gradeportal import models  # noqa
from gradeportal.api.v1.endpoints import evaluations, health, questions, reports
from gradeportal.core.config import settings
from gradeportal.core.logging_config import setup_logging
from gradeportal.db.base import Base
from gradeportal.db.session import engine
from gradeportal.services.question_catalog import QuestionCatalog

setup_logging(settings.LOG_LEVEL)

app = FastAPI(title=settings.PROJECT_NAME)

origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.question_catalog = QuestionCatalog(
    ttl_seconds=settings.QUESTION_CACHE_TTL_SECONDS
)


@app.on_event("startup")
def on_startup():
    Base.metadata.create_all(bind=engine)


app.include_router(questions.router, prefix="/api/v1")
app.include_router(evaluations.router, prefix="/api/v1")
app.include_router(reports.router, prefix="/api/v1")
app.include_router(health.router, prefix="/api/v1")
