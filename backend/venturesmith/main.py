import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .database import Base, engine
from .journey import default_graph
from .models import User, Venture  # noqa: F401  (registers tables)
from .routes.chat import router as chat_router
from .routes.journey import router as journey_router
from .routes.tasks import router as tasks_router
from .routes.ventures import router as ventures_router


# Load environment variables from .env file
load_dotenv()

_DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173"


def _cors_origins():
    raw = os.getenv("CORS_ORIGINS", _DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):

    # Startup
    Base.metadata.create_all(bind=engine)
    graph = default_graph()
    print("Starting VentureSmith")
    print(f"   OpenAI Key:  {' Configured' if os.getenv('OPENAI_API_KEY') else ' Not set (generation disabled)'}")
    print(f"   Journey:     {len(graph.phases)} phases, {len(graph.tasks)} tasks")
    print("   Ready to build ventures!")

    yield

    print("Shutting down VentureSmith")


app = FastAPI(
    title="VentureSmith — AI Venture-Building Journey",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],  # Allow all HTTP methods
    allow_headers=["*"],  # Allow all headers
)

app.include_router(journey_router)
app.include_router(ventures_router)
app.include_router(tasks_router)
app.include_router(chat_router)


@app.get(
    "/",
    summary="API Root",
    description="Welcome endpoint with API information",
    tags=["General"]
)
async def root():
    """Root endpoint with API information."""
    return {
        "name": "VentureSmith",
        "version": "0.1.0",
        "description": "Guided, AI-generated venture building from a single idea",
        "docs": "/docs",
        "endpoints": {
            "phases": "GET /journey/phases - Journey phase table",
            "ventures": "POST /ventures/ - Submit an idea",
            "journey": "GET /ventures/{id}/journey - Task gate states",
            "generate": "POST /ventures/{id}/tasks/{task_id}/generate - Generate an artifact",
            "chat": "POST /chat/{id}/ask - Ask the AI Co-Founder",
        }
    }


@app.get(
    "/health",
    summary="Global Health Check",
    description="Check if the API server is running",
    tags=["General"]
)
async def health():
    """Global health check endpoint."""
    return {
        "status": "healthy",
        "service": "venturesmith",
        "version": "0.1.0"
    }


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler for unhandled errors."""
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "detail": str(exc) if os.getenv("DEBUG", "false").lower() == "true" else "An unexpected error occurred"
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "venturesmith.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("DEBUG", "true").lower() == "true",
    )
