from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from bukva.config import settings
from bukva.database import engine, Base, SessionLocal
from bukva.routes import auth, sections, exercises, results
from bukva.seed import seed_database
# Import all models to ensure tables are created on startup
import bukva.models  # noqa: F401

app = FastAPI(
    title=settings.APP_NAME,
    debug=settings.DEBUG
)

# CORS configuration - allow frontend URL from settings or default to all origins
allowed_origins = [settings.FRONTEND_URL] if settings.FRONTEND_URL != "*" else ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    # 1️⃣ Create tables
    print("🔵 Creating database tables...")
    Base.metadata.create_all(bind=engine)
    tables = inspect(engine).get_table_names()
    print(f"📊 Existing tables: {tables}")

    if not settings.SEED_ON_STARTUP:
        print("ℹ️ Seeding disabled")
        return

    # 2️⃣ Seed users, sections and exercises
    db = SessionLocal()
    try:
        seed_database(db, settings.EXERCISES_PATH)
    except SQLAlchemyError as e:
        print(f"❌ Seed error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


app.include_router(auth.router)
app.include_router(sections.router)
app.include_router(exercises.router)
app.include_router(results.router)


@app.get("/")
async def root():
    return {
        "message": f"{settings.APP_NAME} API",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": settings.APP_NAME
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "bukva.main:app",
        host="127.0.0.1",
        port=3000,
        reload=False
    )
