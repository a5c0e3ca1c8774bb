from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import eventhub.models  # noqa: F401  registers every mapped class
from eventhub.core.config import settings
from eventhub.core.logging_utils import configure_logging
from eventhub.database.db import Base, engine
from eventhub.routes import admin, bookings, events, reactions, recommendations, tags

configure_logging(settings.log_level)

app = FastAPI(title="eventhub")

# Configure CORS
origins = [
    "*"
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create all tables (in production, use migrations such as Alembic)
if settings.auto_create_tables:
    Base.metadata.create_all(bind=engine)

# Include the routers
app.include_router(events.router)
app.include_router(bookings.router)
app.include_router(reactions.router)
app.include_router(recommendations.router)
app.include_router(tags.router)
app.include_router(admin.router)
