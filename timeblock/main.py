import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from .config import LOG_LEVEL
from .database import engine, SessionLocal, Base, get_db
from .routes import day, records, catalog, reports
from .services.persistence import DebouncedSaver, SnapshotRepository
from .services.planner_service import PlannerService, get_planner, planner_service

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the stored snapshot before serving and flush pending saves on the way out."""
    repository = SnapshotRepository()
    db = SessionLocal()
    try:
        planner_service.load_from(db, repository)
    finally:
        db.close()
    logger.info(f"Loaded planner state for {planner_service.current_date}")

    saver = DebouncedSaver(repository.save_snapshot)
    planner_service.attach_saver(saver)
    saver.start()
    yield
    saver.stop()


# Create FastAPI app
app = FastAPI(
    title="Time Block Planner API",
    description="Plan the working day in 15-minute blocks, log what actually happened, and report on the difference",
    version="1.0.0",
    lifespan=lifespan,
)

# Include routers
app.include_router(day.router, prefix="/day", tags=["day"])
app.include_router(records.router, prefix="/records", tags=["records"])
app.include_router(catalog.router, prefix="/catalog", tags=["catalog"])
app.include_router(reports.router, prefix="/reports", tags=["reports"])

@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": "Welcome to the Time Block Planner API",
        "version": "1.0.0",
        "endpoints": {
            "day": "GET /day/{date} - Slot grid, plans, entries and live selection",
            "select": "POST /day/{date}/press|move|release - Drag-select a range of slots",
            "mode": "POST /day/mode - Switch between plan and log mode",
            "plans": "CRUD /records/plans/* - Planned blocks",
            "entries": "CRUD /records/entries/* - Logged blocks",
            "catalog": "GET /catalog/ - Purpose categories and people",
            "reports": "GET /reports/?window=this_week - Time breakdowns"
        },
        "swagger_ui": "/docs - Interactive API documentation",
        "redoc": "/redoc - Alternative API documentation"
    }

@app.get("/health")
def health_check(db: Session = Depends(get_db), planner: PlannerService = Depends(get_planner)):
    """Health check endpoint, including a round trip to the snapshot database"""
    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        logger.error(f"Health check could not reach the database: {e}")
        database = "unavailable"
    return {
        "status": "healthy" if database == "ok" else "degraded",
        "message": "API is running",
        "database": database,
        "save_status": planner.save_status,
    }

# This allows running the app directly with: python -m timeblock.main
if __name__ == "__main__":
    import uvicorn
    # Use import string format for reload to work
    uvicorn.run("timeblock.main:app", host="0.0.0.0", port=8000, reload=True)
